"""Single push or pull against the server, using the staging directory.

This module provides:
- TransferAdapter: Turns one project push/pull into one call that
  returns the server summary or raises

No retries and no staging management happen here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from zanatasync.client.project import PullItem, PullParams, PushParams
from zanatasync.client.sync.types import StagingError, SyncRequest

if TYPE_CHECKING:
    from zanatasync.client.project import Project

logger = logging.getLogger(__name__)


class TransferAdapter:
    """Runs pushes and pulls whose files live in the staging directory.

    Usage:
        adapter = TransferAdapter(project)
        summary = adapter.pull(request, ["en", "zh_Hans"])
    """

    def __init__(self, project: Project) -> None:
        self._project = project

    def pull(self, request: SyncRequest, locales: list[str]) -> Any:
        """Pull into the staging directory.

        Every received item is written to the staging directory before
        this returns. Files written before a failure are left for the
        staging cleanup.

        Args:
            request: Sync parameters.
            locales: Locales in remote form.

        Returns:
            The pull summary.

        Raises:
            APIError: If the server rejects the pull.
            StagingError: If an item cannot be written.
        """
        staging_dir = request.staging_dir
        params = PullParams(
            project=str(request.project_id),
            version=str(request.version),
            pull_type=request.scope,
            locales=locales,
            source_dir=staging_dir,
            destination_dir=staging_dir,
            force=True,
        )

        def write_item(item: PullItem) -> None:
            path = staging_dir / item.filename
            try:
                path.write_bytes(item.data)
            except OSError as e:
                raise StagingError(f"Could not write {path}: {e}") from e
            logger.debug(f"Received {item.filename}")

        return self._project.pull(params, on_item=write_item)

    def push(self, request: SyncRequest, locales: list[str]) -> Any:
        """Push the content of the staging directory.

        Args:
            request: Sync parameters.
            locales: Locales in remote form.

        Returns:
            The push summary.

        Raises:
            APIError: If the server rejects the push.
        """
        params = PushParams(
            project=str(request.project_id),
            version=str(request.version),
            push_type=request.scope,
            locales=locales,
            source_dir=request.staging_dir,
            destination_dir=request.staging_dir,
            copy_trans=True,
            project_type="gettext",
        )
        return self._project.push(params)
