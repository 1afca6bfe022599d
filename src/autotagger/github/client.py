"""GitHub REST API client."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from autotagger.api import (
    APIAuthError,
    APIConflictError,
    APIError,
    APINotFoundError,
    APIRateLimitError,
    BaseAPIClient,
)
from autotagger.github.models import ChangedFile, IssueComment, TagRef
from autotagger.versioning.models import TagPage


class GitHubError(APIError):
    """Base exception for GitHub API errors."""

    pass


class GitHubAuthError(GitHubError, APIAuthError):
    """Authentication error (missing or invalid token)."""

    pass


class GitHubNotFoundError(GitHubError, APINotFoundError):
    """Resource not found."""

    pass


class TagConflictError(GitHubError, APIConflictError):
    """The tag being created already exists."""

    pass


class GitHubRateLimitError(GitHubError, APIRateLimitError):
    """Rate limit exceeded."""

    def __init__(self, retry_after: int | None = None) -> None:
        super().__init__(retry_after=retry_after)


class GitHubClient(BaseAPIClient):
    """Client for the GitHub REST API, scoped to one repository.

    Implements the operations the release flow needs: paginated tag
    listing, commit comparison, tag creation and pull request comments.
    Nothing is retried; every failure surfaces as a GitHubError.
    """

    BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0
    API_VERSION = "2022-11-28"
    PER_PAGE = 100

    _error_cls = GitHubError
    _auth_error_cls = GitHubAuthError
    _not_found_cls = GitHubNotFoundError
    _conflict_cls = TagConflictError
    _rate_limit_cls = GitHubRateLimitError
    _error_message_key = "message"
    _api_name = "GitHub"

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            owner: Repository owner (user or organization login).
            repo: Repository name.
            token: Token with permission to create refs and comments.
            base_url: API root, e.g. for GitHub Enterprise Server.
            timeout: Request timeout in seconds.
        """
        super().__init__()

        if not token:
            raise GitHubAuthError("You must enable GITHUB_TOKEN access for this action")

        self.owner = owner
        self.repo = repo
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def repo_path(self) -> str:
        """Get the API path of the repository."""
        return f"/repos/{self.owner}/{self.repo}"

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client with auth headers."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {self._token}",
                    "X-GitHub-Api-Version": self.API_VERSION,
                },
            )
        return self._client

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, turning transport failures into GitHubError."""
        client = self._get_client()
        try:
            return client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise GitHubError(f"Connection error: {e}") from e

    def fetch_tag_page(self, page: int) -> TagPage:
        """Get one page of tag names.

        Args:
            page: Page number, starting at 1.

        Returns:
            The tag ref names on the page and whether more pages follow,
            based on the ``rel="next"`` entry of the Link header.
        """
        refs, has_more = self.fetch_tag_refs(page)
        return TagPage(names=[r.ref for r in refs], has_more=has_more)

    def fetch_tag_refs(self, page: int) -> tuple[list[TagRef], bool]:
        """Get one page of tag references.

        Uses the matching-refs endpoint, which returns an empty list rather
        than 404 when the repository has no tags.

        Returns:
            Tuple of (refs, has_more).
        """
        response = self._request(
            "GET",
            f"{self.repo_path}/git/matching-refs/tags",
            params={"per_page": self.PER_PAGE, "page": page},
        )
        data = self._handle_response(response)

        refs = []
        for item in data:
            try:
                refs.append(TagRef.model_validate(item))
            except ValidationError:
                # Skip malformed refs but continue processing
                continue

        return refs, "next" in response.links

    def iter_tag_refs(self) -> Iterator[TagRef]:
        """Iterate over every tag reference, fetching pages as needed."""
        page = 1
        while True:
            refs, has_more = self.fetch_tag_refs(page)
            yield from refs
            if not has_more:
                return
            page += 1

    def compare_commits(self, base: str, head: str) -> list[str]:
        """Get the names of files changed between two commit-ish refs.

        Follows ``rel="next"`` pages of the file list.

        Args:
            base: Base ref (tag name or sha).
            head: Head ref (tag name or sha).

        Returns:
            Filenames of changed files.
        """
        return [f.filename for f in self.get_changed_files(base, head)]

    def get_changed_files(self, base: str, head: str) -> list[ChangedFile]:
        """Get the files changed between two commit-ish refs."""
        basehead = f"{quote(base, safe='/')}...{quote(head, safe='/')}"
        files: list[ChangedFile] = []
        page = 1
        while True:
            response = self._request(
                "GET",
                f"{self.repo_path}/compare/{basehead}",
                params={"per_page": self.PER_PAGE, "page": page},
            )
            data = self._handle_response(response)

            try:
                files.extend(ChangedFile.model_validate(f) for f in data.get("files", []))
            except ValidationError as e:
                raise GitHubError(f"Failed to parse compare response: {e}") from e

            if "next" not in response.links:
                return files
            page += 1

    def create_tag_ref(self, tag: str, sha: str) -> TagRef:
        """Create a lightweight tag pointing at a commit.

        Args:
            tag: Tag name, without ``refs/tags/``.
            sha: Commit sha to tag.

        Returns:
            The created reference.

        Raises:
            TagConflictError: If the tag already exists.
        """
        ref = f"refs/tags/{tag}"
        response = self._request(
            "POST",
            f"{self.repo_path}/git/refs",
            json={"ref": ref, "sha": sha},
        )

        # GitHub answers 422 "Reference already exists" for duplicates
        if response.status_code == 422 and "already exists" in self._error_message(response):
            raise TagConflictError(f"Tag {tag} already exists")

        data = self._handle_response(response)
        try:
            return TagRef.model_validate(data)
        except ValidationError as e:
            raise GitHubError(f"Failed to parse reference response: {e}") from e

    def create_pr_comment(self, number: int, body: str) -> IssueComment:
        """Comment on a pull request.

        Args:
            number: Pull request number.
            body: Markdown comment body.

        Returns:
            The created comment.
        """
        response = self._request(
            "POST",
            f"{self.repo_path}/issues/{number}/comments",
            json={"body": body},
        )
        data = self._handle_response(response)
        try:
            return IssueComment.model_validate(data)
        except ValidationError as e:
            raise GitHubError(f"Failed to parse comment response: {e}") from e
