"""Project commands for the zanata-sync CLI.

Commands:
- project-list: List all active projects
- project-info: Show information for a specific project
"""

from __future__ import annotations

import click

from zanatasync.client.cli.common import (
    echo_success,
    open_project,
    run_command,
    server_options,
)


@click.command("project-list")
@server_options
def project_list(url: str, username: str, api_key: str) -> None:
    """List all projects."""

    def body() -> None:
        with open_project(url, username, api_key) as project:
            projects = project.list_projects()

        active = [p for p in projects if p.is_active]
        echo_success(f"{len(active)} active projects were found:")
        for summary in active:
            click.echo(f"{summary.name} ({summary.id})")

    run_command(body, "An error occurred when loading the projects.")


@click.command("project-info")
@server_options
@click.option("--project-id", "-p", required=True, help="The project id to use.")
def project_info(url: str, username: str, api_key: str, project_id: str) -> None:
    """Show information for a specific project."""

    def body() -> None:
        with open_project(url, username, api_key) as project:
            info = project.info(project_id)

        latest = info.latest_version
        echo_success(f"Project {project_id} was successfully loaded")
        click.echo(f"Project name: {info.name}")
        click.echo(f"Latest version: {latest.id if latest else 'none'}")

    run_command(body, f"An error occurred when loading the project {project_id}.")
