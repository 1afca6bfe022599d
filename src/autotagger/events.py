"""GitHub event payload models and loading."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError

from autotagger.errors import EventError

PULL_REQUEST_EVENT = "pull_request"


class RepositoryOwner(BaseModel):
    """Owner of a repository."""

    login: str


class Repository(BaseModel):
    """Repository the event was triggered in."""

    name: str
    owner: RepositoryOwner
    full_name: str | None = None


class PullRequest(BaseModel):
    """The pull request part of a ``pull_request`` event."""

    number: int
    merged: bool = False
    merge_commit_sha: str | None = None
    title: str | None = None
    html_url: str | None = None


class PullRequestEvent(BaseModel):
    """A ``pull_request`` webhook event."""

    action: str
    pull_request: PullRequest
    repository: Repository

    @property
    def is_merged_close(self) -> bool:
        """Check if the event closed the pull request by merging it."""
        return self.action == "closed" and self.pull_request.merged

    @property
    def owner(self) -> str:
        return self.repository.owner.login

    @property
    def repo(self) -> str:
        return self.repository.name


def load_event(path: Path | str | None) -> PullRequestEvent:
    """Read and parse the event payload GitHub wrote for this run.

    Args:
        path: Path to the JSON payload (``GITHUB_EVENT_PATH``).

    Returns:
        The parsed pull request event.

    Raises:
        EventError: If the file is missing, unreadable or not a pull
            request event.
    """
    if not path:
        raise EventError("could not read event info: GITHUB_EVENT_PATH is not set")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise EventError(f"could not read event info: {e}") from e
    except json.JSONDecodeError as e:
        raise EventError(f"could not unmarshal event info: {e}") from e

    try:
        return PullRequestEvent.model_validate(data)
    except ValidationError as e:
        raise EventError(f"could not unmarshal event info: {e}") from e
