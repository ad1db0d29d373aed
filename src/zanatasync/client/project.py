"""Project-level operations on a Zanata server.

This module provides:
- Project: High-level handle combining the REST client and gettext conversion
- PullParams / PushParams: Parameters of a pull or push
- PullItem: One file produced by a pull
- PullSummary / PushSummary: Results of a pull or push

Pull reports every produced file through a callback before returning,
push reads its files from a directory. A failed server call raises
APIError and ends the operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import polib

from zanatasync.client import gettext
from zanatasync.client.api import (
    DocumentStats,
    ProjectInfo,
    ProjectSummary,
    VersionInfo,
    ZanataClient,
)
from zanatasync.core.types import TransferScope

logger = logging.getLogger(__name__)

SUPPORTED_PROJECT_TYPES = ("gettext",)


def server_locale_id(locale: str) -> str:
    """Get the server locale id for a locale in file-name form (zh_Hans → zh-Hans)."""
    return locale.replace("_", "-")


class PullItemKind(str, Enum):
    """Kind of file produced by a pull."""

    POT = "pot"
    PO = "po"


@dataclass
class PullItem:
    """One file produced by a pull.

    Attributes:
        kind: Source template or locale translation.
        name: Source document name.
        data: File content.
        locale: Locale in file-name form (translations only).
    """

    kind: PullItemKind
    name: str
    data: bytes
    locale: str | None = None

    @property
    def filename(self) -> str:
        """File name of the item: "{name}.pot" or "{locale}.po"."""
        if self.kind == PullItemKind.POT:
            return f"{self.name}.pot"
        return f"{self.locale}.po"


@dataclass
class PullParams:
    """Parameters of a pull."""

    project: str
    version: str
    locales: list[str]
    source_dir: Path
    destination_dir: Path
    pull_type: TransferScope = TransferScope.BOTH
    force: bool = True


@dataclass
class PushParams:
    """Parameters of a push."""

    project: str
    version: str
    locales: list[str]
    source_dir: Path
    destination_dir: Path
    push_type: TransferScope = TransferScope.BOTH
    copy_trans: bool = True
    project_type: str = "gettext"


@dataclass
class PullSummary:
    """Result of a pull."""

    documents: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class PushSummary:
    """Result of a push."""

    documents: list[str] = field(default_factory=list)
    translations: list[tuple[str, str]] = field(default_factory=list)


class Project:
    """Project operations on a Zanata server.

    Usage:
        with ZanataClient(config) as client:
            project = Project(client)
            summary = project.pull(params, on_item=write_file)
    """

    def __init__(self, client: ZanataClient) -> None:
        self._client = client

    # === Metadata ===

    def list_projects(self) -> list[ProjectSummary]:
        """List all projects."""
        return self._client.list_projects()

    def info(self, project_id: str) -> ProjectInfo:
        """Get a project with its versions."""
        return self._client.get_project(project_id)

    def version_info(
        self, project_id: str, version: str, include_locales: bool = True
    ) -> VersionInfo:
        """Get a version, optionally with its locales."""
        info = self._client.get_version(project_id, version)
        if include_locales:
            info.locales = self._client.get_version_locales(project_id, version)
        return info

    def create_version(
        self, project_id: str, version: str, project_type: str = "gettext"
    ) -> VersionInfo:
        """Create a version."""
        return self._client.create_version(project_id, version, project_type)

    def pull_sources(self, project_id: str, version: str) -> list[str]:
        """List the source documents of a version."""
        return self._client.list_documents(project_id, version)

    def stats(self, project_id: str, version: str, document: str) -> DocumentStats:
        """Get word statistics of a document."""
        return self._client.get_document_stats(project_id, version, document, word=True)

    # === Transfers ===

    def pull(self, params: PullParams, on_item: Callable[[PullItem], None]) -> PullSummary:
        """Download source templates and/or translations.

        Translation files are named "{locale}.po" without the document
        name, so a version is expected to hold a single document: with
        several, later documents overwrite the files of earlier ones.

        Args:
            params: What to pull and where it goes.
            on_item: Called with every produced file, before this returns.

        Returns:
            Summary of the pulled documents and files.

        Raises:
            APIError: If any server call fails.
        """
        summary = PullSummary()
        documents = self._client.list_documents(params.project, params.version)
        logger.info(
            f"Pulling {len(documents)} documents of {params.project}/{params.version}"
        )
        if len(documents) > 1 and params.pull_type.includes_translations:
            logger.warning(
                f"{params.project}/{params.version} has {len(documents)} documents; "
                f"their translations share one {{locale}}.po file per locale"
            )

        for document in documents:
            resource = self._client.get_resource(params.project, params.version, document)
            summary.documents.append(document)

            if params.pull_type.includes_source:
                item = PullItem(
                    kind=PullItemKind.POT,
                    name=document,
                    data=gettext.resource_to_pot(resource),
                )
                self._emit(params, item, on_item, summary)

            if params.pull_type.includes_translations:
                for locale in params.locales:
                    server_locale = server_locale_id(locale)
                    translations = self._client.get_translations(
                        params.project, params.version, document, server_locale
                    )
                    if translations is None:
                        logger.debug(f"No translations for {document} in {server_locale}")
                    item = PullItem(
                        kind=PullItemKind.PO,
                        name=document,
                        locale=locale,
                        data=gettext.translations_to_po(resource, translations, server_locale),
                    )
                    self._emit(params, item, on_item, summary)

        return summary

    @staticmethod
    def _emit(
        params: PullParams,
        item: PullItem,
        on_item: Callable[[PullItem], None],
        summary: PullSummary,
    ) -> None:
        target_dir = params.source_dir if item.kind == PullItemKind.POT else params.destination_dir
        if not params.force and (target_dir / item.filename).exists():
            logger.info(f"Skipping existing file {item.filename}")
            summary.skipped.append(item.filename)
            return
        on_item(item)
        summary.files.append(item.filename)

    def push(self, params: PushParams) -> PushSummary:
        """Upload source templates and/or translations from a directory.

        Source templates are read from `source_dir` as "*.pot" (the file
        stem is the document name); translations are read from
        `destination_dir` as "{locale}.po" for every document.
        The same locale file is sent to every document, which only makes
        sense for versions with a single document.

        Returns:
            Summary of the pushed documents and translations.

        Raises:
            APIError: If any server call fails.
            ValueError: If the project type is not supported.
            OSError: If a file cannot be read.
        """
        if params.project_type not in SUPPORTED_PROJECT_TYPES:
            raise ValueError(f"Unsupported project type: {params.project_type}")

        summary = PushSummary()
        templates = sorted(p for p in params.source_dir.glob("*.pot") if p.is_file())

        if params.push_type.includes_source:
            for template in templates:
                resource = gettext.pot_to_resource(polib.pofile(str(template)), template.stem)
                logger.info(f"Pushing source document {template.stem}")
                self._client.put_resource(
                    params.project,
                    params.version,
                    template.stem,
                    resource,
                    copy_trans=params.copy_trans,
                )
                summary.documents.append(template.stem)

        if params.push_type.includes_translations:
            if templates:
                documents = [t.stem for t in templates]
            else:
                documents = self._client.list_documents(params.project, params.version)
            if len(documents) > 1:
                logger.warning(
                    f"Sending the same translation files to {len(documents)} documents "
                    f"of {params.project}/{params.version}"
                )

            for document in documents:
                for locale in params.locales:
                    po_path = params.destination_dir / f"{locale}.po"
                    if not po_path.is_file():
                        logger.debug(f"No translation file for {locale}, skipping")
                        continue
                    translations = gettext.po_to_translations(polib.pofile(str(po_path)))
                    server_locale = server_locale_id(locale)
                    logger.info(f"Pushing {server_locale} translations of {document}")
                    self._client.put_translations(
                        params.project,
                        params.version,
                        document,
                        server_locale,
                        translations,
                        merge="auto",
                    )
                    summary.translations.append((document, server_locale))

        return summary
