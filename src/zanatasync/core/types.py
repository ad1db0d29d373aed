"""Shared types for zanatasync.

This module defines enums used by both the transfer client and the CLI.
"""

from __future__ import annotations

from enum import Enum


class TransferScope(str, Enum):
    """Which file categories a push or pull includes."""

    SOURCE = "source"
    TRANS = "trans"
    BOTH = "both"

    @property
    def includes_source(self) -> bool:
        """Whether source templates (.pot) are transferred."""
        return self in (TransferScope.SOURCE, TransferScope.BOTH)

    @property
    def includes_translations(self) -> bool:
        """Whether locale translations (.po) are transferred."""
        return self in (TransferScope.TRANS, TransferScope.BOTH)


class SyncDirection(str, Enum):
    """Direction of a sync."""

    PUSH = "push"
    PULL = "pull"
