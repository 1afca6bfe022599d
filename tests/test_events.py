"""Tests for event payload loading."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from autotagger.errors import EventError
from autotagger.events import PullRequestEvent, load_event


class TestPullRequestEvent:
    """Tests for the event models."""

    def test_merged_close(self, make_payload: Callable[..., dict]) -> None:
        """Test a merged close is ready to tag."""
        event = PullRequestEvent.model_validate(make_payload())
        assert event.is_merged_close is True
        assert event.owner == "octo"
        assert event.repo == "repo"

    def test_closed_without_merge(self, make_payload: Callable[..., dict]) -> None:
        """Test a closed but unmerged PR is not ready."""
        event = PullRequestEvent.model_validate(make_payload(merged=False))
        assert event.is_merged_close is False

    def test_other_action(self, make_payload: Callable[..., dict]) -> None:
        """Test other actions are not ready."""
        event = PullRequestEvent.model_validate(make_payload(action="synchronize"))
        assert event.is_merged_close is False


class TestLoadEvent:
    """Tests for reading the payload file."""

    def test_load(self, write_event: Callable[..., Path]) -> None:
        """Test loading a valid payload."""
        event = load_event(write_event())
        assert event.pull_request.number == 42
        assert event.pull_request.merge_commit_sha == "a" * 40

    def test_missing_path(self) -> None:
        """Test an unset path is an error."""
        with pytest.raises(EventError, match="GITHUB_EVENT_PATH"):
            load_event(None)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test an unreadable file is an error."""
        with pytest.raises(EventError, match="could not read event info"):
            load_event(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test a file that isn't JSON is an error."""
        path = tmp_path / "event.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(EventError, match="could not unmarshal"):
            load_event(path)

    def test_not_a_pull_request_event(self, tmp_path: Path) -> None:
        """Test a payload without a pull request is an error."""
        path = tmp_path / "event.json"
        path.write_text(json.dumps({"ref": "refs/heads/main"}), encoding="utf-8")
        with pytest.raises(EventError, match="could not unmarshal"):
            load_event(path)
