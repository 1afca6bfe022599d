"""Data models for GitHub API responses."""

from pydantic import BaseModel, Field

TAG_REF_PREFIX = "refs/tags/"


class GitObject(BaseModel):
    """The object a git reference points to."""

    sha: str
    type: str = "commit"


class TagRef(BaseModel):
    """A git reference under ``refs/tags/``."""

    ref: str
    target: GitObject | None = Field(default=None, alias="object")

    model_config = {"populate_by_name": True}

    @property
    def tag_name(self) -> str:
        """Get the tag name without the ``refs/tags/`` prefix."""
        return self.ref.removeprefix(TAG_REF_PREFIX)


class ChangedFile(BaseModel):
    """A file changed between two commits."""

    filename: str
    status: str | None = None  # e.g., "added", "modified", "removed"


class IssueComment(BaseModel):
    """A comment on an issue or pull request."""

    id: int
    body: str = ""
    html_url: str | None = None
