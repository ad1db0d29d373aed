"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, ConfigurationError, StagingError, RetriesExhaustedError,
  CommandTimeoutError: Exception classes
- SyncRequest: Parameters of one push or pull
- StagingKind, StagingFile: Files staged for or received from a transfer
- TransferResult: Outcome of a successful transfer
- RetryStatus, RetryState: Bounded retry bookkeeping for one push
- SyncPhase: Phases of one sync
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any

from zanatasync.core.types import SyncDirection, TransferScope


class SyncError(Exception):
    """Base exception for sync errors."""


class ConfigurationError(SyncError):
    """Required settings are missing or inconsistent."""


class StagingError(SyncError):
    """Creating, filling or emptying the staging directory failed."""


class RetriesExhaustedError(SyncError):
    """Push failed on every allowed attempt.

    Attributes:
        attempts: Number of attempts made.
        last_error: Failure of the last attempt.
    """

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Push failed on attempt {attempts} of {attempts}: {last_error}")


class CommandTimeoutError(SyncError):
    """The command did not settle before its deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:.0f}s")


@dataclass
class SyncRequest:
    """Parameters of one push or pull.

    Attributes:
        project_id: Project slug on the server.
        version: Version id on the server.
        locales: Locale ids in local form (e.g. "zh-Hans").
        staging_dir: Transient directory shared with the transfer.
        translation_folder: Local folder holding *.pot and *.po files.
        scope: Which file categories to transfer.
        exclude_files: File names skipped when staging a push.
        max_attempts: Push attempts before giving up.
    """

    project_id: str | None
    version: str | None
    locales: list[str]
    staging_dir: Path
    translation_folder: Path
    scope: TransferScope = TransferScope.BOTH
    exclude_files: frozenset[str] = field(default_factory=frozenset)
    max_attempts: int = 4

    def __post_init__(self) -> None:
        self.staging_dir = Path(self.staging_dir)
        self.translation_folder = Path(self.translation_folder)
        self.scope = TransferScope(self.scope)
        self.exclude_files = frozenset(self.exclude_files)

    def validate(self, direction: SyncDirection) -> None:
        """Check the request before anything touches disk or network.

        Raises:
            ConfigurationError: If a required setting is missing or invalid.
        """
        if not self.project_id:
            raise ConfigurationError("You need to specify a project id.")
        if not self.version:
            raise ConfigurationError("You need to specify a version.")
        if not self.locales:
            raise ConfigurationError("You need to specify at least one locale.")
        staging = self.staging_dir.resolve()
        folder = self.translation_folder.resolve()
        if staging.is_relative_to(folder) or folder.is_relative_to(staging):
            raise ConfigurationError(
                f"The staging directory {self.staging_dir} must be outside the "
                f"translation folder {self.translation_folder} and must not contain it."
            )
        if direction == SyncDirection.PUSH and self.max_attempts < 1:
            raise ConfigurationError("The try count must be at least 1.")


class StagingKind(Enum):
    """Logical kind of a staged file."""

    SOURCE_TEMPLATE = auto()
    LOCALE_TRANSLATION = auto()


@dataclass
class StagingFile:
    """A file staged for a push or placed after a pull."""

    path: Path
    kind: StagingKind
    locale: str | None = None


@dataclass
class TransferResult:
    """Outcome of a successful transfer.

    Attributes:
        payload: Summary returned by the server side (opaque here).
        attempts: Attempts it took (always 1 for a pull).
    """

    payload: Any = None
    attempts: int = 1


class RetryStatus(Enum):
    """State of a bounded retry."""

    ATTEMPTING = auto()
    SUCCEEDED = auto()
    EXHAUSTED = auto()


@dataclass
class RetryState:
    """Attempt counter scoped to one push."""

    max_attempts: int
    attempts: int = 0
    status: RetryStatus = RetryStatus.ATTEMPTING

    def begin_attempt(self) -> int:
        """Count a new attempt and return its number."""
        self.attempts += 1
        return self.attempts

    def record_failure(self) -> bool:
        """Record that the current attempt failed.

        Returns:
            True if no attempt is left.
        """
        if self.attempts >= self.max_attempts:
            self.status = RetryStatus.EXHAUSTED
            return True
        return False

    def record_success(self) -> None:
        self.status = RetryStatus.SUCCEEDED


class SyncPhase(Enum):
    """Phases of one sync, in order."""

    PREPARING = auto()
    TRANSFERRING = auto()
    PLACING = auto()
    SETTLING = auto()
    CLEANING_UP = auto()
    DONE = auto()
    FAILED = auto()
