"""Shared helpers for zanata-sync CLI commands.

This module provides:
- server_options: The connection options every command takes
- open_project: Project handle bound to a server
- run_command: Deadline, error reporting and exit status of a command
- Colored output helpers and logging setup
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import click

from zanatasync.client.api import APIError, ZanataClient
from zanatasync.client.project import Project
from zanatasync.client.sync.types import CommandTimeoutError, SyncError
from zanatasync.core.config import ServerConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Overall deadline of one command
COMMAND_TIMEOUT = 5 * 60.0  # seconds

F = TypeVar("F", bound=Callable[..., Any])


class ClickEchoHandler(logging.Handler):
    """Logging handler printing records to stderr through click.

    Warnings are yellow, errors red.
    """

    COLORS = {logging.WARNING: "yellow", logging.ERROR: "red", logging.CRITICAL: "red"}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            click.echo(click.style(msg, fg=self.COLORS.get(record.levelno)), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(verbosity: int = 0) -> None:
    """Route zanatasync log records to the terminal.

    Args:
        verbosity: 0 shows warnings and errors, 1 adds info, 2 adds debug.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))

    zanata_logger = logging.getLogger("zanatasync")
    for existing in zanata_logger.handlers[:]:
        zanata_logger.removeHandler(existing)
    zanata_logger.addHandler(handler)
    zanata_logger.setLevel(level)


def echo_success(message: str) -> None:
    click.echo(click.style(message, fg="green"))


def echo_warning(message: str) -> None:
    click.echo(click.style(message, fg="yellow"))


def echo_error(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)


def server_options(func: F) -> F:
    """Add --url, --username and --api-key to a command."""
    options = [
        click.option(
            "--url",
            "-u",
            required=True,
            envvar="ZANATA_URL",
            help="The URL of the Zanata server.",
        ),
        click.option(
            "--username",
            "-U",
            required=True,
            envvar="ZANATA_USERNAME",
            help="The Zanata user to use.",
        ),
        click.option(
            "--api-key",
            "-K",
            required=True,
            envvar="ZANATA_API_KEY",
            help="The API key of the Zanata user.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@contextmanager
def open_project(url: str, username: str, api_key: str) -> Iterator[Project]:
    """Open a project handle on a server, closing its connection on exit."""
    config = ServerConfig(url=url, username=username, api_key=api_key)
    with ZanataClient(config) as client:
        yield Project(client)


def run_with_deadline(func: Callable[[], T], timeout: float = COMMAND_TIMEOUT) -> T:
    """Run func, giving up waiting for it after timeout seconds.

    The work runs on a daemon thread. On timeout it is not interrupted;
    only the caller stops waiting.

    Raises:
        CommandTimeoutError: If func did not finish in time.
        Exception: Whatever func raised.
    """
    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["result"] = func()
        except BaseException as e:  # re-raised in the calling thread
            outcome["error"] = e

    thread = threading.Thread(target=target, name="zanata-command", daemon=True)
    thread.start()
    thread.join(timeout)

    if thread.is_alive():
        raise CommandTimeoutError(timeout)
    if "error" in outcome:
        raise outcome["error"]
    result: T = outcome["result"]
    return result


def run_command(
    func: Callable[[], T],
    failure_message: str,
    timeout: float = COMMAND_TIMEOUT,
) -> T:
    """Run a command body; report failures and exit with status 1.

    Args:
        func: The command body.
        failure_message: What was being done, e.g. "An error occurred when ...".
        timeout: Overall deadline in seconds.
    """
    try:
        return run_with_deadline(func, timeout)
    except Exception as e:
        if not isinstance(e, (SyncError, APIError)):
            logger.debug(f"Unexpected {type(e).__name__} in command", exc_info=True)
        echo_error(failure_message)
        echo_error(f"Error: {e}")
        sys.exit(1)
