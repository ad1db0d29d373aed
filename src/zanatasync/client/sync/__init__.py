"""Push and pull synchronization through a staging directory.

Architecture:
    SyncEngine → StagingArea → TransferAdapter (→ attempt_push) → Project

Components:
- **SyncEngine**: Sequences staging, transfer, placement and cleanup
- **StagingArea**: Owns the transient staging directory
- **TransferAdapter**: One push or pull against the server
- **attempt_push**: Bounded retry around a push
- **LocaleCodec**: Local/remote locale id conversion
"""

from zanatasync.client.sync.engine import PULL_SETTLE_DELAY, SyncEngine
from zanatasync.client.sync.locale import (
    LocaleCodec,
    LocaleFunction,
    hyphen_to_underscore,
    underscore_to_hyphen,
)
from zanatasync.client.sync.retry import DEFAULT_MAX_ATTEMPTS, attempt_push
from zanatasync.client.sync.staging import StagingArea
from zanatasync.client.sync.transfer import TransferAdapter
from zanatasync.client.sync.types import (
    CommandTimeoutError,
    ConfigurationError,
    RetriesExhaustedError,
    RetryState,
    RetryStatus,
    StagingError,
    StagingFile,
    StagingKind,
    SyncError,
    SyncPhase,
    SyncRequest,
    TransferResult,
)

__all__ = [
    # Engine
    "PULL_SETTLE_DELAY",
    "SyncEngine",
    # Locale
    "LocaleCodec",
    "LocaleFunction",
    "hyphen_to_underscore",
    "underscore_to_hyphen",
    # Retry
    "DEFAULT_MAX_ATTEMPTS",
    "attempt_push",
    # Staging / transfer
    "StagingArea",
    "TransferAdapter",
    # Types
    "CommandTimeoutError",
    "ConfigurationError",
    "RetriesExhaustedError",
    "RetryState",
    "RetryStatus",
    "StagingError",
    "StagingFile",
    "StagingKind",
    "SyncError",
    "SyncPhase",
    "SyncRequest",
    "TransferResult",
]
