"""Command-line interface for zanata-sync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- project-list: List all active projects
- project-info: Show information for a specific project
- version-info: Show the locales of a version
- version-stats: Show translation progress of a version
- version-create: Create a new version
- push: Push the translation folder to a version
- pull: Pull a version into the translation folder

Every option can get its default from config/zanata.json (or --config).
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from zanatasync import __version__
from zanatasync.client.cli.common import echo_error, setup_logging
from zanatasync.client.cli.config import (
    build_default_map,
    get_config_file,
    get_current_version,
    load_config,
    resolve_version,
)
from zanatasync.client.cli.project import project_info, project_list
from zanatasync.client.cli.sync import pull, push
from zanatasync.client.cli.version import version_create, version_info, version_stats
from zanatasync.client.sync.types import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="zanata-sync")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ./config/zanata.json).",
)
@click.option("--verbose", "-v", count=True, help="Show more output (-vv for debug).")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: int) -> None:
    """zanata-sync - Synchronize gettext translation files with Zanata."""
    setup_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        echo_error(f"Error: {e}")
        sys.exit(1)

    ctx.obj = config
    group = ctx.command
    assert isinstance(group, click.Group)
    ctx.default_map = build_default_map(config, group.commands)


# Project commands
cli.add_command(project_list)
cli.add_command(project_info)

# Version commands
cli.add_command(version_info)
cli.add_command(version_stats)
cli.add_command(version_create)

# Sync commands
cli.add_command(push)
cli.add_command(pull)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    # Main entry points
    "cli",
    "main",
    # Config utilities
    "get_config_file",
    "get_current_version",
    "load_config",
    "resolve_version",
]
