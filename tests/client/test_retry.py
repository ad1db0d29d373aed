"""Tests for the bounded push retry."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from zanatasync.client.sync import (
    ConfigurationError,
    RetriesExhaustedError,
    RetryState,
    RetryStatus,
    attempt_push,
)


def failing_then(failures: int, payload: object = "summary") -> MagicMock:
    """Mock push failing `failures` times before returning payload."""
    errors = [RuntimeError(f"server hiccup {i + 1}") for i in range(failures)]
    return MagicMock(side_effect=[*errors, payload])


class TestAttemptPush:
    """Tests for attempt_push."""

    def test_first_attempt_succeeds(self) -> None:
        """Should call push once and return its payload."""
        push = MagicMock(return_value="summary")

        result = attempt_push(push, max_attempts=4)

        assert result.payload == "summary"
        assert result.attempts == 1
        push.assert_called_once_with()

    def test_succeeds_on_last_attempt(self, caplog: pytest.LogCaptureFixture) -> None:
        """Three failures then success should report four attempts and three notices."""
        push = failing_then(3)

        with caplog.at_level(logging.WARNING, logger="zanatasync"):
            result = attempt_push(push, max_attempts=4)

        assert result.attempts == 4
        assert push.call_count == 4
        notices = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert notices == [
            "Version update failed (try #1), trying again...",
            "Version update failed (try #2), trying again...",
            "Version update failed (try #3), trying again...",
        ]

    def test_all_attempts_fail(self) -> None:
        """Should stop after max_attempts and carry the last failure."""
        push = MagicMock(side_effect=[RuntimeError(f"failure {i}") for i in range(1, 5)])

        with pytest.raises(RetriesExhaustedError) as exc_info:
            attempt_push(push, max_attempts=4)

        assert push.call_count == 4
        assert exc_info.value.attempts == 4
        assert str(exc_info.value.last_error) == "failure 4"
        assert exc_info.value.__cause__ is exc_info.value.last_error

    def test_single_attempt_does_not_retry(self, caplog: pytest.LogCaptureFixture) -> None:
        """max_attempts=1 should fail right away without a retry notice."""
        push = MagicMock(side_effect=RuntimeError("nope"))

        with caplog.at_level(logging.WARNING, logger="zanatasync"), pytest.raises(
            RetriesExhaustedError
        ):
            attempt_push(push, max_attempts=1)

        push.assert_called_once()
        assert not [r for r in caplog.records if r.levelno == logging.WARNING]

    def test_zero_attempts_rejected(self) -> None:
        """Should refuse a budget below one without calling push."""
        push = MagicMock()

        with pytest.raises(ConfigurationError):
            attempt_push(push, max_attempts=0)

        push.assert_not_called()

    def test_non_retryable_error_propagates(self) -> None:
        """Errors outside retryable_exceptions should not be retried."""
        push = MagicMock(side_effect=KeyError("bad"))

        with pytest.raises(KeyError):
            attempt_push(push, max_attempts=4, retryable_exceptions=(RuntimeError,))

        push.assert_called_once()

    def test_state_tracks_success(self) -> None:
        """The given state should record attempts and the outcome."""
        state = RetryState(max_attempts=3)

        attempt_push(failing_then(1), state=state)

        assert state.attempts == 2
        assert state.status == RetryStatus.SUCCEEDED

    def test_state_tracks_exhaustion(self) -> None:
        """The given state budget should win over max_attempts."""
        state = RetryState(max_attempts=2)
        push = MagicMock(side_effect=RuntimeError("down"))

        with pytest.raises(RetriesExhaustedError):
            attempt_push(push, max_attempts=10, state=state)

        assert push.call_count == 2
        assert state.status == RetryStatus.EXHAUSTED


class TestRetryState:
    """Tests for RetryState bookkeeping."""

    def test_initial_state(self) -> None:
        state = RetryState(max_attempts=4)
        assert state.attempts == 0
        assert state.status == RetryStatus.ATTEMPTING

    def test_failure_before_budget_is_spent(self) -> None:
        """A failure with attempts left should not exhaust the state."""
        state = RetryState(max_attempts=2)
        state.begin_attempt()
        assert state.record_failure() is False
        assert state.status == RetryStatus.ATTEMPTING
