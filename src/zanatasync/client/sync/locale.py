"""Locale id conversion between local file names and the server side.

Local ids use a hyphen (zh-Hans), staged file names use an underscore
(zh_Hans). Only the first separator is converted; ids with several
separators need custom functions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

LocaleFunction = Callable[[str], str]


def hyphen_to_underscore(locale: str) -> str:
    return locale.replace("-", "_", 1)


def underscore_to_hyphen(locale: str) -> str:
    return locale.replace("_", "-", 1)


@dataclass(frozen=True)
class LocaleCodec:
    """Pair of locale conversions, one per direction.

    Attributes:
        remote: Local id → staged/remote form.
        local: Staged/remote form → local id.
    """

    remote: LocaleFunction = hyphen_to_underscore
    local: LocaleFunction = underscore_to_hyphen

    def to_remote(self, locale: str) -> str:
        return self.remote(locale)

    def to_local(self, locale: str) -> str:
        return self.local(locale)

    def remote_locales(self, locales: list[str]) -> list[str]:
        """Convert a list of local ids, keeping order and dropping duplicates."""
        return list(dict.fromkeys(self.to_remote(locale) for locale in locales))
