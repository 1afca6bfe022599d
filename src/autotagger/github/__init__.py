"""GitHub REST API integration."""

from autotagger.github.client import (
    GitHubAuthError,
    GitHubClient,
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    TagConflictError,
)
from autotagger.github.models import ChangedFile, GitObject, IssueComment, TagRef

__all__ = [
    "GitHubClient",
    "GitHubError",
    "GitHubAuthError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "TagConflictError",
    "ChangedFile",
    "GitObject",
    "IssueComment",
    "TagRef",
]
