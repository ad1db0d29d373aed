"""Tests for the push/pull sync engine."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from zanatasync.client.api import APIError
from zanatasync.client.project import PullSummary, PushSummary
from zanatasync.client.sync import (
    ConfigurationError,
    RetriesExhaustedError,
    StagingArea,
    SyncEngine,
    SyncRequest,
    TransferAdapter,
)


@pytest.fixture
def translation_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "translations"
    folder.mkdir()
    (folder / "source.pot").write_text('msgid "Hello"\nmsgstr ""\n')
    (folder / "en.po").write_text('msgid "Hello"\nmsgstr "Hello"\n')
    (folder / "zh-Hans.po").write_text('msgid "Hello"\nmsgstr "hi"\n')
    (folder / "excluded.pot").write_text('msgid "Internal"\nmsgstr ""\n')
    return folder


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    return tmp_path / "tmp" / ".zanata"


def make_request(
    translation_folder: Path, staging_dir: Path, **overrides: object
) -> SyncRequest:
    values: dict[str, object] = {
        "project_id": "my-app",
        "version": "1.0",
        "locales": ["en", "zh-Hans"],
        "staging_dir": staging_dir,
        "translation_folder": translation_folder,
        "scope": "both",
        "exclude_files": {"excluded.pot"},
        "max_attempts": 4,
    }
    values.update(overrides)
    return SyncRequest(**values)  # type: ignore[arg-type]


def snapshot(folder: Path) -> dict[str, str]:
    return {p.name: p.read_text() for p in folder.iterdir()}


class TestPush:
    """Tests for SyncEngine.push."""

    def test_stages_and_pushes(self, translation_folder: Path, staging_dir: Path) -> None:
        """The push should see the renamed files, and staging should be gone afterwards."""
        transfer = MagicMock(spec=TransferAdapter)
        seen: dict[str, object] = {}

        def fake_push(request, locales):
            seen["files"] = sorted(p.name for p in staging_dir.iterdir())
            seen["locales"] = locales
            return PushSummary(documents=["source"])

        transfer.push.side_effect = fake_push
        request = make_request(translation_folder, staging_dir)

        result = SyncEngine(transfer, settle_delay=0).push(request)

        assert seen["files"] == ["en.po", "source.pot", "zh_Hans.po"]
        assert seen["locales"] == ["en", "zh_Hans"]
        assert result.attempts == 1
        assert result.payload.documents == ["source"]
        assert not staging_dir.exists()

    def test_retries_until_success(
        self,
        translation_folder: Path,
        staging_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Success on the fourth attempt should report four attempts and three notices."""
        transfer = MagicMock(spec=TransferAdapter)
        transfer.push.side_effect = [
            APIError("busy", 503),
            APIError("busy", 503),
            APIError("busy", 503),
            PushSummary(),
        ]

        with caplog.at_level(logging.WARNING, logger="zanatasync"):
            result = SyncEngine(transfer, settle_delay=0).push(
                make_request(translation_folder, staging_dir)
            )

        assert result.attempts == 4
        notices = [r for r in caplog.records if "trying again" in r.getMessage()]
        assert len(notices) == 3
        assert not staging_dir.exists()

    def test_exhausted_retries_clean_up(self, translation_folder: Path, staging_dir: Path) -> None:
        """Four failures should raise, remove staging and leave the folder untouched."""
        before = snapshot(translation_folder)
        transfer = MagicMock(spec=TransferAdapter)
        transfer.push.side_effect = APIError("down", 500)

        with pytest.raises(RetriesExhaustedError) as exc_info:
            SyncEngine(transfer, settle_delay=0).push(make_request(translation_folder, staging_dir))

        assert transfer.push.call_count == 4
        assert isinstance(exc_info.value.last_error, APIError)
        assert not staging_dir.exists()
        assert snapshot(translation_folder) == before

    def test_try_count_is_honored(self, translation_folder: Path, staging_dir: Path) -> None:
        transfer = MagicMock(spec=TransferAdapter)
        transfer.push.side_effect = APIError("down", 500)

        with pytest.raises(RetriesExhaustedError):
            SyncEngine(transfer, settle_delay=0).push(
                make_request(translation_folder, staging_dir, max_attempts=2)
            )

        assert transfer.push.call_count == 2

    def test_cleanup_runs_once(self, translation_folder: Path, staging_dir: Path) -> None:
        """Cleanup should run exactly once per push."""
        staging = StagingArea()
        transfer = MagicMock(spec=TransferAdapter)
        transfer.push.return_value = PushSummary()

        with patch.object(staging, "cleanup", wraps=staging.cleanup) as cleanup:
            SyncEngine(transfer, staging=staging, settle_delay=0).push(
                make_request(translation_folder, staging_dir)
            )

        cleanup.assert_called_once_with(staging_dir)

    def test_missing_project_id(self, translation_folder: Path, staging_dir: Path) -> None:
        """An incomplete request should fail before anything is staged."""
        transfer = MagicMock(spec=TransferAdapter)
        staging = MagicMock(wraps=StagingArea())

        with pytest.raises(ConfigurationError, match="project id"):
            SyncEngine(transfer, staging=staging).push(
                make_request(translation_folder, staging_dir, project_id=None)
            )

        staging.prepare.assert_not_called()
        transfer.push.assert_not_called()
        assert not staging_dir.exists()

    def test_staging_dir_must_differ(self, translation_folder: Path) -> None:
        """Staging into the translation folder should be refused."""
        transfer = MagicMock(spec=TransferAdapter)
        before = snapshot(translation_folder)

        with pytest.raises(ConfigurationError):
            SyncEngine(transfer).push(make_request(translation_folder, translation_folder))

        assert snapshot(translation_folder) == before

    def test_staging_dir_containing_folder_rejected(self, tmp_path: Path) -> None:
        """A staging directory above the translation folder should be refused."""
        work = tmp_path / "work"
        folder = work / "translations"
        folder.mkdir(parents=True)
        (folder / "en.po").write_text('msgid "Hello"\nmsgstr "Hello"\n')
        (work / "README.txt").write_text("project notes")
        transfer = MagicMock(spec=TransferAdapter)

        with pytest.raises(ConfigurationError, match="translation folder"):
            SyncEngine(transfer, settle_delay=0).push(make_request(folder, work))

        transfer.push.assert_not_called()
        assert (folder / "en.po").exists()
        assert (work / "README.txt").read_text() == "project notes"

    def test_staging_dir_inside_folder_rejected(self, translation_folder: Path) -> None:
        transfer = MagicMock(spec=TransferAdapter)

        with pytest.raises(ConfigurationError):
            SyncEngine(transfer).pull(make_request(translation_folder, translation_folder / ".zanata"))

        assert not (translation_folder / ".zanata").exists()


class TestPull:
    """Tests for SyncEngine.pull."""

    def test_places_pulled_files(self, translation_folder: Path, staging_dir: Path) -> None:
        """Pulled files should land in the folder and staging should be gone."""
        transfer = MagicMock(spec=TransferAdapter)

        def fake_pull(request, locales):
            (staging_dir / "en.po").write_text("en")
            (staging_dir / "de.po").write_text("de")
            (staging_dir / "source.pot").write_text("template")
            return PullSummary(files=["en.po", "de.po", "source.pot"])

        transfer.pull.side_effect = fake_pull
        request = make_request(translation_folder, staging_dir, locales=["en", "de"], scope="trans")

        result = SyncEngine(transfer, settle_delay=0).pull(request)

        assert (translation_folder / "en.po").read_text() == "en"
        assert (translation_folder / "de.po").read_text() == "de"
        assert (translation_folder / "source.pot").read_text() == "template"
        assert result.attempts == 1
        assert not staging_dir.exists()

    def test_decodes_locale_file_names(self, tmp_path: Path, staging_dir: Path) -> None:
        """zh_Hans.po should come back as zh-Hans.po, with remote locales sent."""
        output = tmp_path / "translations"
        transfer = MagicMock(spec=TransferAdapter)

        def fake_pull(request, locales):
            assert locales == ["zh_Hans"]
            (staging_dir / "zh_Hans.po").write_text("chinese")
            return PullSummary(files=["zh_Hans.po"])

        transfer.pull.side_effect = fake_pull

        SyncEngine(transfer, settle_delay=0).pull(
            make_request(output, staging_dir, locales=["zh-Hans"], scope="trans")
        )

        assert [p.name for p in output.iterdir()] == ["zh-Hans.po"]

    def test_partial_failure_cleans_up(self, translation_folder: Path, staging_dir: Path) -> None:
        """A failing pull should leave the folder untouched and remove staging."""
        before = snapshot(translation_folder)
        transfer = MagicMock(spec=TransferAdapter)

        def fake_pull(request, locales):
            (staging_dir / "en.po").write_text("partial")
            raise APIError("connection reset")

        transfer.pull.side_effect = fake_pull

        with pytest.raises(APIError):
            SyncEngine(transfer, settle_delay=0).pull(make_request(translation_folder, staging_dir))

        transfer.pull.assert_called_once()
        assert snapshot(translation_folder) == before
        assert not staging_dir.exists()

    def test_waits_after_placing(self, translation_folder: Path, staging_dir: Path) -> None:
        """Should pause for the settle delay before reporting success."""
        transfer = MagicMock(spec=TransferAdapter)
        transfer.pull.return_value = PullSummary()

        with patch("zanatasync.client.sync.engine.time.sleep") as sleep:
            SyncEngine(transfer, settle_delay=0.25).pull(
                make_request(translation_folder, staging_dir)
            )

        sleep.assert_called_once_with(0.25)

    def test_missing_version(self, translation_folder: Path, staging_dir: Path) -> None:
        transfer = MagicMock(spec=TransferAdapter)

        with pytest.raises(ConfigurationError, match="version"):
            SyncEngine(transfer).pull(make_request(translation_folder, staging_dir, version=""))

        transfer.pull.assert_not_called()
        assert not staging_dir.exists()

    def test_cleanup_runs_once_on_failure(self, translation_folder: Path, staging_dir: Path) -> None:
        staging = StagingArea()
        transfer = MagicMock(spec=TransferAdapter)
        transfer.pull.side_effect = APIError("down", 500)

        with patch.object(staging, "cleanup", wraps=staging.cleanup) as cleanup, patch.object(
            staging, "place_from_pull"
        ) as place, pytest.raises(APIError):
            SyncEngine(transfer, staging=staging, settle_delay=0).pull(
                make_request(translation_folder, staging_dir)
            )

        cleanup.assert_called_once_with(staging_dir)
        place.assert_not_called()
