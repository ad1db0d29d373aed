"""Staging directory management.

The staging directory is the only place files are exchanged with a
transfer: a push copies the translation folder into it (renaming locale
files to their remote form), a pull receives files in it and copies them
back out (renaming to the local form). It is emptied and removed after
every sync.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from zanatasync.client.sync.locale import LocaleFunction
from zanatasync.client.sync.types import StagingError, StagingFile, StagingKind

logger = logging.getLogger(__name__)

POT_SUFFIX = ".pot"
PO_SUFFIX = ".po"


def _classify(name: str) -> StagingKind | None:
    if name.endswith(POT_SUFFIX):
        return StagingKind.SOURCE_TEMPLATE
    if name.endswith(PO_SUFFIX):
        return StagingKind.LOCALE_TRANSLATION
    return None


def _locale_stem(name: str) -> str:
    return name[: -len(PO_SUFFIX)]


class StagingArea:
    """Creates, fills and tears down staging directories."""

    def prepare(self, staging_dir: Path) -> None:
        """Create the staging directory (and its parents) if needed.

        Files left behind by an abandoned run are removed so they cannot
        be mistaken for output of this sync.

        Raises:
            StagingError: If the directory cannot be created.
        """
        try:
            staging_dir.mkdir(parents=True, exist_ok=True)
            stale = [p for p in staging_dir.iterdir() if p.is_file()]
            if stale:
                logger.warning(
                    f"Removing {len(stale)} stale files from staging directory {staging_dir}"
                )
                for path in stale:
                    path.unlink()
        except OSError as e:
            raise StagingError(f"Could not create staging directory {staging_dir}: {e}") from e

    def collect_for_push(
        self,
        source_dir: Path,
        staging_dir: Path,
        exclude: Iterable[str],
        encode_locale: LocaleFunction,
    ) -> list[StagingFile]:
        """Copy the translation folder into the staging directory.

        "*.pot" files are copied as is, "*.po" files are renamed to the
        remote form of their locale. Excluded names and other files are
        skipped.

        Returns:
            The staged files.

        Raises:
            StagingError: If the folder cannot be read or a copy fails.
        """
        excluded = set(exclude)
        staged: list[StagingFile] = []

        try:
            entries = sorted(source_dir.iterdir())
        except OSError as e:
            raise StagingError(f"Could not read translation folder {source_dir}: {e}") from e

        for path in entries:
            if path.name in excluded or not path.is_file():
                continue
            kind = _classify(path.name)
            if kind == StagingKind.SOURCE_TEMPLATE:
                staged_file = StagingFile(staging_dir / path.name, kind)
            elif kind == StagingKind.LOCALE_TRANSLATION:
                locale = encode_locale(_locale_stem(path.name))
                staged_file = StagingFile(staging_dir / f"{locale}{PO_SUFFIX}", kind, locale)
            else:
                continue

            self._copy(path, staged_file.path)
            staged.append(staged_file)

        logger.debug(f"Staged {len(staged)} files from {source_dir}")
        return staged

    def place_from_pull(
        self,
        staging_dir: Path,
        output_dir: Path,
        decode_locale: LocaleFunction,
    ) -> list[StagingFile]:
        """Copy pulled files from the staging directory to the output folder.

        "*.pot" files keep their name, "*.po" files are renamed to the
        local form of their locale.

        Returns:
            The placed files (paths inside the output folder).

        Raises:
            StagingError: If a copy fails.
        """
        placed: list[StagingFile] = []

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            entries = sorted(staging_dir.iterdir())
        except OSError as e:
            raise StagingError(f"Could not place pulled files into {output_dir}: {e}") from e

        for path in entries:
            if not path.is_file():
                continue
            kind = _classify(path.name)
            if kind == StagingKind.SOURCE_TEMPLATE:
                placed_file = StagingFile(output_dir / path.name, kind)
            elif kind == StagingKind.LOCALE_TRANSLATION:
                locale = decode_locale(_locale_stem(path.name))
                placed_file = StagingFile(output_dir / f"{locale}{PO_SUFFIX}", kind, locale)
            else:
                continue

            self._copy(path, placed_file.path)
            placed.append(placed_file)

        logger.debug(f"Placed {len(placed)} files into {output_dir}")
        return placed

    def cleanup(self, staging_dir: Path) -> None:
        """Delete every file in the staging directory, then the directory.

        Subdirectories are never removed; a staging directory that still
        holds one is left in place. Missing directories are fine. Failures
        are logged, never raised, so they cannot hide the outcome of the sync.
        """
        if not staging_dir.exists():
            return
        try:
            for path in staging_dir.iterdir():
                if path.is_file() or path.is_symlink():
                    path.unlink()
            staging_dir.rmdir()
        except OSError as e:
            logger.warning(f"Could not clean up staging directory {staging_dir}: {e}")

    @contextmanager
    def staged(self, staging_dir: Path) -> Iterator[Path]:
        """Prepare the staging directory and always clean it up on exit."""
        try:
            self.prepare(staging_dir)
            yield staging_dir
        finally:
            self.cleanup(staging_dir)

    @staticmethod
    def _copy(source: Path, destination: Path) -> None:
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise StagingError(f"Could not copy {source} to {destination}: {e}") from e
