"""Push and pull orchestration.

Architecture:
    SyncEngine → StagingArea.staged (prepare, cleanup on exit) → collect (push only)
               → TransferAdapter (pull directly, push through attempt_push)
               → StagingArea (place, pull only)

Phases of one sync:
    PREPARING → TRANSFERRING → PLACING, SETTLING (pull only) → CLEANING_UP → DONE | FAILED
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from zanatasync.client.sync.locale import LocaleCodec
from zanatasync.client.sync.retry import attempt_push
from zanatasync.client.sync.staging import StagingArea
from zanatasync.client.sync.types import (
    RetryState,
    SyncPhase,
    SyncRequest,
    TransferResult,
)
from zanatasync.core.types import SyncDirection

if TYPE_CHECKING:
    from zanatasync.client.sync.transfer import TransferAdapter

logger = logging.getLogger(__name__)

# Pause after placing pulled files. Reads issued right after a pull could
# otherwise be answered with stale ETags by the server.
PULL_SETTLE_DELAY = 0.001  # seconds


class SyncEngine:
    """Runs one push or pull at a time per staging directory.

    Usage:
        engine = SyncEngine(TransferAdapter(project))
        result = engine.pull(request)
    """

    def __init__(
        self,
        transfer: TransferAdapter,
        staging: StagingArea | None = None,
        codec: LocaleCodec | None = None,
        settle_delay: float = PULL_SETTLE_DELAY,
    ) -> None:
        """Initialize the sync engine.

        Args:
            transfer: Adapter performing the server calls.
            staging: Staging directory manager.
            codec: Locale conversions (hyphen/underscore by default).
            settle_delay: Seconds to wait after placing pulled files.
        """
        self._transfer = transfer
        self._staging = staging or StagingArea()
        self._codec = codec or LocaleCodec()
        self._settle_delay = settle_delay

    def _enter(self, phase: SyncPhase, direction: SyncDirection, request: SyncRequest) -> None:
        logger.debug(
            f"{direction.value} {request.project_id}/{request.version}: {phase.name.lower()}"
        )

    def push(self, request: SyncRequest) -> TransferResult:
        """Push the translation folder to the server.

        Args:
            request: Sync parameters.

        Returns:
            Result of the successful attempt.

        Raises:
            ConfigurationError: If the request is incomplete (nothing is staged).
            StagingError: If staging fails.
            RetriesExhaustedError: If every push attempt failed.
        """
        direction = SyncDirection.PUSH
        request.validate(direction)
        locales = self._codec.remote_locales(request.locales)
        state = RetryState(max_attempts=request.max_attempts)

        self._enter(SyncPhase.PREPARING, direction, request)
        try:
            with self._staging.staged(request.staging_dir):
                self._staging.collect_for_push(
                    request.translation_folder,
                    request.staging_dir,
                    request.exclude_files,
                    self._codec.to_remote,
                )

                self._enter(SyncPhase.TRANSFERRING, direction, request)
                result = attempt_push(lambda: self._transfer.push(request, locales), state=state)
                self._enter(SyncPhase.CLEANING_UP, direction, request)
        except Exception:
            self._enter(SyncPhase.FAILED, direction, request)
            raise

        self._enter(SyncPhase.DONE, direction, request)
        logger.info(
            f"The version {request.version} was successfully updated for "
            f"{request.project_id} (try #{result.attempts})"
        )
        return result

    def pull(self, request: SyncRequest) -> TransferResult:
        """Pull files from the server into the translation folder.

        A pull is never retried.

        Args:
            request: Sync parameters.

        Returns:
            Result carrying the pull summary.

        Raises:
            ConfigurationError: If the request is incomplete (nothing is staged).
            StagingError: If staging or placement fails.
            APIError: If the server rejects the pull.
        """
        direction = SyncDirection.PULL
        request.validate(direction)
        locales = self._codec.remote_locales(request.locales)

        self._enter(SyncPhase.PREPARING, direction, request)
        try:
            with self._staging.staged(request.staging_dir):
                self._enter(SyncPhase.TRANSFERRING, direction, request)
                payload = self._transfer.pull(request, locales)

                self._enter(SyncPhase.PLACING, direction, request)
                self._staging.place_from_pull(
                    request.staging_dir,
                    request.translation_folder,
                    self._codec.to_local,
                )

                self._enter(SyncPhase.SETTLING, direction, request)
                time.sleep(self._settle_delay)
                self._enter(SyncPhase.CLEANING_UP, direction, request)
        except Exception:
            self._enter(SyncPhase.FAILED, direction, request)
            raise

        self._enter(SyncPhase.DONE, direction, request)
        logger.info(f"The version {request.version} was successfully pulled for {request.project_id}")
        return TransferResult(payload=payload)
