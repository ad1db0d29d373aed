"""Core module - Shared configuration and types."""

from zanatasync.core.config import ServerConfig
from zanatasync.core.types import SyncDirection, TransferScope

__all__ = [
    # Config
    "ServerConfig",
    # Types
    "SyncDirection",
    "TransferScope",
]
