"""Push and pull commands for the zanata-sync CLI.

Commands:
- push: Update a version with the files of the translation folder
- pull: Pull files of a version into the translation folder

The server push endpoint is a bit flaky, so push tries a few times
(--try-count, 4 by default) before giving up.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click

from zanatasync.client.cli.common import (
    echo_success,
    open_project,
    run_command,
    server_options,
)
from zanatasync.client.cli.config import (
    DEFAULT_EXCLUDE_FILES,
    DEFAULT_LOCALES,
    DEFAULT_PULL_TYPE,
    DEFAULT_PUSH_TYPE,
    DEFAULT_TMP_DIR,
    DEFAULT_TRANSLATION_FOLDER,
    DEFAULT_TRY_COUNT,
    load_locale_function,
    resolve_version,
    split_values,
)
from zanatasync.client.project import Project, PullSummary, PushSummary
from zanatasync.client.sync import (
    LocaleCodec,
    SyncEngine,
    SyncRequest,
    TransferAdapter,
    TransferResult,
)

SCOPES = click.Choice(["source", "trans", "both"])


def build_codec(
    remote_function: str | None = None, local_function: str | None = None
) -> LocaleCodec:
    """Build the locale codec, replacing the default functions where configured."""
    codec = LocaleCodec()
    remote = load_locale_function(remote_function) or codec.remote
    local = load_locale_function(local_function) or codec.local
    return LocaleCodec(remote=remote, local=local)


def build_request(
    project_id: str,
    version: str,
    translation_folder: str,
    locales: Sequence[str],
    update_type: str,
    tmp_dir: str,
    exclude_files: Sequence[str] = (),
    try_count: int = DEFAULT_TRY_COUNT,
) -> SyncRequest:
    """Build a sync request from option values."""
    return SyncRequest(
        project_id=project_id,
        version=version,
        locales=split_values(locales),
        staging_dir=Path(tmp_dir),
        translation_folder=Path(translation_folder),
        scope=update_type,
        exclude_files=frozenset(split_values(exclude_files)),
        max_attempts=try_count,
    )


def push_request_from_config(
    config: dict[str, Any], project_id: str, version: str
) -> SyncRequest:
    """Build a push request from configuration file settings and defaults."""
    return build_request(
        project_id=project_id,
        version=version,
        translation_folder=config.get("translation_folder", DEFAULT_TRANSLATION_FOLDER),
        locales=config.get("locales", DEFAULT_LOCALES),
        update_type=config.get("update_type", DEFAULT_PUSH_TYPE),
        tmp_dir=config.get("tmp_dir", DEFAULT_TMP_DIR),
        exclude_files=config.get("exclude_files", DEFAULT_EXCLUDE_FILES),
        try_count=int(config.get("try_count", DEFAULT_TRY_COUNT)),
    )


def run_push(project: Project, request: SyncRequest, codec: LocaleCodec) -> TransferResult:
    """Push the translation folder and report the result."""
    engine = SyncEngine(TransferAdapter(project), codec=codec)
    result = engine.push(request)
    echo_success(f"The version {request.version} was successfully updated for {request.project_id}")
    if isinstance(result.payload, PushSummary):
        click.echo(
            f"Pushed {len(result.payload.documents)} documents and "
            f"{len(result.payload.translations)} translations."
        )
    return result


def run_pull(project: Project, request: SyncRequest, codec: LocaleCodec) -> TransferResult:
    """Pull into the translation folder and report the result."""
    engine = SyncEngine(TransferAdapter(project), codec=codec)
    result = engine.pull(request)
    echo_success(f"The version {request.version} was successfully pulled for {request.project_id}")
    if isinstance(result.payload, PullSummary):
        click.echo(f"Pulled {len(result.payload.files)} files into {request.translation_folder}.")
    return result


def _project_options(func: Any) -> Any:
    func = click.option("--version", "-v", required=True, help="The version to use.")(func)
    func = click.option("--project-id", "-p", required=True, help="The project id to use.")(func)
    return func


@click.command()
@server_options
@_project_options
@click.option(
    "--translation-folder",
    "-t",
    default=DEFAULT_TRANSLATION_FOLDER,
    show_default=True,
    help="The folder where the translations are.",
)
@click.option(
    "--locales",
    "-l",
    multiple=True,
    default=DEFAULT_LOCALES,
    show_default=True,
    help="Locales to push (repeat or separate with commas).",
)
@click.option(
    "--exclude-files",
    "-e",
    multiple=True,
    default=DEFAULT_EXCLUDE_FILES,
    show_default=True,
    help="Files of the translation folder to ignore.",
)
@click.option(
    "--update-type",
    type=SCOPES,
    default=DEFAULT_PUSH_TYPE,
    show_default=True,
    help='"source" for source files only, "trans" for translated files only, "both" for all.',
)
@click.option(
    "--try-count",
    type=click.IntRange(min=1),
    default=DEFAULT_TRY_COUNT,
    show_default=True,
    help="How often to try to push before giving up.",
)
@click.option("--tmp-dir", default=DEFAULT_TMP_DIR, show_default=True, help="Staging directory.")
@click.option(
    "--remote-locale-function",
    default=None,
    help="Locale conversion for file names, as 'package.module:function'.",
)
def push(
    url: str,
    username: str,
    api_key: str,
    project_id: str,
    version: str,
    translation_folder: str,
    locales: tuple[str, ...],
    exclude_files: tuple[str, ...],
    update_type: str,
    try_count: int,
    tmp_dir: str,
    remote_locale_function: str | None,
) -> None:
    """Update a version with data from your translation folder.

    \b
    Push all files:               zanata-sync push
    Push translation files only:  zanata-sync push --update-type=trans
    Push source files only:       zanata-sync push --update-type=source
    """

    def body() -> TransferResult:
        request = build_request(
            project_id=project_id,
            version=resolve_version(version),
            translation_folder=translation_folder,
            locales=locales,
            update_type=update_type,
            tmp_dir=tmp_dir,
            exclude_files=exclude_files,
            try_count=try_count,
        )
        codec = build_codec(remote_function=remote_locale_function)
        with open_project(url, username, api_key) as project:
            return run_push(project, request, codec)

    run_command(body, f"An error occurred when updating version {version} for {project_id}.")


@click.command()
@server_options
@_project_options
@click.option(
    "--translation-folder",
    "-t",
    default=DEFAULT_TRANSLATION_FOLDER,
    show_default=True,
    help="The folder where the translations should be put into.",
)
@click.option(
    "--locales",
    "-l",
    multiple=True,
    default=DEFAULT_LOCALES,
    show_default=True,
    help="Locales to pull (repeat or separate with commas).",
)
@click.option(
    "--update-type",
    type=SCOPES,
    default=DEFAULT_PULL_TYPE,
    show_default=True,
    help='"source" for source files only, "trans" for translated files only, "both" for all.',
)
@click.option("--tmp-dir", default=DEFAULT_TMP_DIR, show_default=True, help="Staging directory.")
@click.option(
    "--local-locale-function",
    default=None,
    help="Locale conversion back to local file names, as 'package.module:function'.",
)
def pull(
    url: str,
    username: str,
    api_key: str,
    project_id: str,
    version: str,
    translation_folder: str,
    locales: tuple[str, ...],
    update_type: str,
    tmp_dir: str,
    local_locale_function: str | None,
) -> None:
    """Pull data from Zanata into your translation folder.

    \b
    Pull translation files only:  zanata-sync pull
    Pull all files:               zanata-sync pull --update-type=both
    Pull source files only:       zanata-sync pull --update-type=source
    """

    def body() -> TransferResult:
        request = build_request(
            project_id=project_id,
            version=resolve_version(version),
            translation_folder=translation_folder,
            locales=locales,
            update_type=update_type,
            tmp_dir=tmp_dir,
        )
        codec = build_codec(local_function=local_locale_function)
        with open_project(url, username, api_key) as project:
            return run_pull(project, request, codec)

    run_command(body, f"An error occurred when pulling version {version} for {project_id}.")
