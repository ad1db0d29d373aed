"""Tests for the transfer adapter."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from zanatasync.client.project import (
    Project,
    PullItem,
    PullItemKind,
    PullSummary,
    PushSummary,
)
from zanatasync.client.sync import StagingError, SyncRequest, TransferAdapter
from zanatasync.core.types import TransferScope


@pytest.fixture
def sync_request(tmp_path: Path) -> SyncRequest:
    staging_dir = tmp_path / ".zanata"
    staging_dir.mkdir()
    return SyncRequest(
        project_id="my-app",
        version="1.0",
        locales=["en", "zh-Hans"],
        staging_dir=staging_dir,
        translation_folder=tmp_path / "translations",
        scope="trans",
    )


class TestPull:
    """Tests for TransferAdapter.pull."""

    def test_writes_items_to_staging(self, sync_request: SyncRequest) -> None:
        """Every emitted item should be in the staging directory when pull returns."""
        project = MagicMock(spec=Project)

        def fake_pull(params, on_item):
            on_item(PullItem(PullItemKind.PO, "messages", b"de content", locale="de"))
            on_item(PullItem(PullItemKind.POT, "messages", b"template"))
            return PullSummary(documents=["messages"], files=["de.po", "messages.pot"])

        project.pull.side_effect = fake_pull

        summary = TransferAdapter(project).pull(sync_request, ["en", "zh_Hans"])

        assert summary.files == ["de.po", "messages.pot"]
        assert (sync_request.staging_dir / "de.po").read_bytes() == b"de content"
        assert (sync_request.staging_dir / "messages.pot").read_bytes() == b"template"

    def test_pull_params(self, sync_request: SyncRequest) -> None:
        """Should pull into the staging directory with the remote locales."""
        project = MagicMock(spec=Project)
        project.pull.return_value = PullSummary()

        TransferAdapter(project).pull(sync_request, ["en", "zh_Hans"])

        params = project.pull.call_args.args[0]
        assert params.project == "my-app"
        assert params.version == "1.0"
        assert params.locales == ["en", "zh_Hans"]
        assert params.pull_type == TransferScope.TRANS
        assert params.source_dir == sync_request.staging_dir
        assert params.destination_dir == sync_request.staging_dir
        assert params.force is True

    def test_write_failure_raises_staging_error(self, sync_request: SyncRequest) -> None:
        """Should raise StagingError when an item cannot be written."""
        project = MagicMock(spec=Project)

        def fake_pull(params, on_item):
            on_item(PullItem(PullItemKind.PO, "messages", b"x", locale="missing-dir/de"))

        project.pull.side_effect = fake_pull

        with pytest.raises(StagingError):
            TransferAdapter(project).pull(sync_request, ["de"])


class TestPush:
    """Tests for TransferAdapter.push."""

    def test_push_params(self, sync_request: SyncRequest) -> None:
        """Should push the staging directory as a gettext project with copy-trans."""
        project = MagicMock(spec=Project)
        project.push.return_value = PushSummary(documents=["messages"])

        summary = TransferAdapter(project).push(sync_request, ["en", "zh_Hans"])

        assert summary.documents == ["messages"]
        params = project.push.call_args.args[0]
        assert params.push_type == TransferScope.TRANS
        assert params.locales == ["en", "zh_Hans"]
        assert params.source_dir == sync_request.staging_dir
        assert params.destination_dir == sync_request.staging_dir
        assert params.copy_trans is True
        assert params.project_type == "gettext"

    def test_push_error_propagates(self, sync_request: SyncRequest) -> None:
        """Should let server errors through unchanged."""
        project = MagicMock(spec=Project)
        project.push.side_effect = RuntimeError("503")

        with pytest.raises(RuntimeError, match="503"):
            TransferAdapter(project).push(sync_request, ["en"])
