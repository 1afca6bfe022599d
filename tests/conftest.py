"""Shared fixtures for autotagger tests."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest


def _make_payload(
    action: str = "closed",
    merged: bool = True,
    merge_commit_sha: str | None = "a" * 40,
    number: int = 42,
) -> dict:
    """Build a trimmed-down pull_request event payload."""
    return {
        "action": action,
        "number": number,
        "pull_request": {
            "number": number,
            "merged": merged,
            "merge_commit_sha": merge_commit_sha,
            "title": "Fix the thing",
        },
        "repository": {
            "name": "repo",
            "full_name": "octo/repo",
            "owner": {"login": "octo"},
        },
    }


@pytest.fixture
def make_payload() -> Callable[..., dict]:
    """Factory for pull_request event payloads."""
    return _make_payload


@pytest.fixture
def write_event(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an event payload to a file and returning its path."""

    def write(**kwargs: object) -> Path:
        path = tmp_path / "event.json"
        path.write_text(json.dumps(_make_payload(**kwargs)), encoding="utf-8")  # type: ignore[arg-type]
        return path

    return write
