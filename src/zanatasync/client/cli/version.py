"""Version commands for the zanata-sync CLI.

Commands:
- version-info: Show the locales of a version
- version-stats: Show translation progress of a version
- version-create: Create a new version (and push the current files to it)
"""

from __future__ import annotations

from typing import Any

import click

from zanatasync.client.api import DocumentStats, VersionExistsError
from zanatasync.client.cli.common import (
    echo_success,
    echo_warning,
    open_project,
    run_command,
    server_options,
)
from zanatasync.client.cli.config import resolve_version
from zanatasync.client.cli.sync import build_codec, push_request_from_config, run_push

# Locale progress above these percentages is shown plain / in yellow; below, in red
GOOD_PROGRESS = 95.0
FAIR_PROGRESS = 80.0


@click.command("version-info")
@server_options
@click.option("--project-id", "-p", required=True, help="The project id to use.")
@click.option("--version", "-v", required=True, help="The version to use.")
def version_info(url: str, username: str, api_key: str, project_id: str, version: str) -> None:
    """Show information for a specific version of a project."""

    def body() -> None:
        resolved = resolve_version(version)
        with open_project(url, username, api_key) as project:
            info = project.version_info(project_id, resolved, include_locales=True)

        echo_success(f"Version {resolved} for project {project_id} was successfully loaded")
        click.echo("It has the following locales:")
        for locale in info.enabled_locales:
            click.echo(f"{locale.locale_id}: {locale.display_name}")

    run_command(body, f"An error occurred when loading the version {version} for {project_id}.")


def _print_stats(stats: DocumentStats, project_id: str, version: str) -> None:
    echo_success(
        f"Translation progress for version {version} of project {project_id} "
        f"(document {stats.document}): {stats.percent:.2f}%"
    )
    for entry in stats.word_stats:
        line = (
            f"{entry.locale}: {entry.percent:.2f}% "
            f"({entry.translated}/{entry.total}) of phrases translated"
        )
        if entry.percent > GOOD_PROGRESS:
            click.echo(line)
        elif entry.percent > FAIR_PROGRESS:
            echo_warning(line)
        else:
            click.echo(click.style(line, fg="red"))


@click.command("version-stats")
@server_options
@click.option("--project-id", "-p", required=True, help="The project id to use.")
@click.option("--version", "-v", required=True, help="The version to use.")
def version_stats(url: str, username: str, api_key: str, project_id: str, version: str) -> None:
    """Show translation progress for a specific version of a project."""

    def body() -> list[DocumentStats]:
        resolved = resolve_version(version)
        results = []
        with open_project(url, username, api_key) as project:
            for document in project.pull_sources(project_id, resolved):
                stats = project.stats(project_id, resolved, document)
                _print_stats(stats, project_id, resolved)
                results.append(stats)
        if not results:
            echo_warning(f"Version {resolved} of project {project_id} has no documents yet.")
        return results

    run_command(body, f"An error occurred when loading the stats for version {version} of {project_id}.")


@click.command("version-create")
@server_options
@click.option("--project-id", "-p", required=True, help="The project id to use.")
@click.option("--version", "-v", required=True, help="The version to create.")
@click.option(
    "--resolve-if-exists",
    is_flag=True,
    default=False,
    help="Do not fail if the version already exists, just do nothing.",
)
@click.option(
    "--update-if-new/--no-update-if-new",
    default=True,
    help="Push the current translation files right after creating the version.",
)
@click.pass_context
def version_create(
    ctx: click.Context,
    url: str,
    username: str,
    api_key: str,
    project_id: str,
    version: str,
    resolve_if_exists: bool,
    update_if_new: bool,
) -> None:
    """Create a new version for a project.

    The translation files are pushed right away using the push settings of
    the configuration file, unless --no-update-if-new is given.
    """
    config: dict[str, Any] = ctx.obj or {}

    def body() -> None:
        resolved = resolve_version(version)
        with open_project(url, username, api_key) as project:
            try:
                project.create_version(project_id, resolved, project_type="gettext")
            except VersionExistsError:
                if not resolve_if_exists:
                    raise
                echo_success(f"The version {resolved} already exists for {project_id}")
                return

            echo_success(f"The version {resolved} was successfully created for {project_id}")

            if not update_if_new:
                echo_success(
                    f'Run zanata-sync push --version="{resolved}" to initialise the version.'
                )
                return

            click.echo("Now, push the current translation files...")
            request = push_request_from_config(config, project_id, resolved)
            run_push(project, request, build_codec(config.get("remote_locale_function")))

        echo_success(f"All done! The new version {resolved} is now ready to be translated.")

    run_command(body, f"An error occurred when creating new version {version} for {project_id}.")
