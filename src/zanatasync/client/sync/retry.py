"""Bounded retry for pushes.

The push endpoint fails now and then for reasons that do not outlive the
request, so a failed push is simply issued again, right away, until it
succeeds or the attempt budget is spent. There is no backoff.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from zanatasync.client.sync.types import (
    ConfigurationError,
    RetriesExhaustedError,
    RetryState,
    TransferResult,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 4


def attempt_push(
    push_fn: Callable[[], Any],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    state: RetryState | None = None,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> TransferResult:
    """Call push_fn until it succeeds, at most max_attempts times.

    Attempts are strictly sequential and stop at the first success.

    Args:
        push_fn: One push attempt; returns the server summary or raises.
        max_attempts: Attempt budget (1 means no retry), unless state is given.
        state: Counter to use; a fresh one is created when omitted.
        retryable_exceptions: Failures that trigger another attempt.

    Returns:
        TransferResult with the summary and the number of attempts.

    Raises:
        ConfigurationError: If max_attempts is lower than 1.
        RetriesExhaustedError: If every attempt failed, chained to the last failure.
    """
    if state is None:
        state = RetryState(max_attempts=max_attempts)
    if state.max_attempts < 1:
        raise ConfigurationError(
            f"max_attempts must be at least 1, got {state.max_attempts}"
        )

    while True:
        attempt = state.begin_attempt()
        try:
            payload = push_fn()
        except retryable_exceptions as e:
            if state.record_failure():
                logger.error(f"Version update failed (try #{attempt}): {e}")
                raise RetriesExhaustedError(attempt, e) from e
            logger.warning(f"Version update failed (try #{attempt}), trying again...")
            continue

        state.record_success()
        return TransferResult(payload=payload, attempts=attempt)
