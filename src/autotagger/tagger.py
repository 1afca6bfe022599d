"""Release orchestration: from a merged pull request to a new tag."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

from autotagger.config import AppConfig
from autotagger.errors import ConfigError, EventError, SkipRelease
from autotagger.events import PULL_REQUEST_EVENT, PullRequestEvent, load_event
from autotagger.github import GitHubClient
from autotagger.versioning import compute_next_version, resolve_last_version, should_tag

COMMENT_TEMPLATE = "Your friendly autotagging bot has tagged this as release **{version}**"

console = Console()

ClientFactory = Callable[[AppConfig, PullRequestEvent], GitHubClient]


class ReleaseResult(BaseModel):
    """What a successful run published."""

    version: str
    previous_version: str
    sha: str
    pull_request: int
    comment: str

    @property
    def ref(self) -> str:
        """Get the full ref name of the created tag."""
        return f"refs/tags/{self.version}"


def default_client_factory(config: AppConfig, event: PullRequestEvent) -> GitHubClient:
    """Create a GitHub client for the repository the event came from."""
    return GitHubClient(
        owner=event.owner,
        repo=event.repo,
        token=config.github.token,
        base_url=config.github.api_url,
        timeout=config.github.timeout,
    )


class ReleaseTagger:
    """Tag merged pull requests with the next patch version."""

    def __init__(
        self,
        config: AppConfig,
        client_factory: ClientFactory | None = None,
        verbose: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the tagger.

        Args:
            config: Configuration built at process start.
            client_factory: Builds the API client for the event's repository.
            verbose: Print every tag ref examined.
            clock: Returns the current time, for build metadata dates.
        """
        self.config = config
        self._client_factory = client_factory or default_client_factory
        self.verbose = verbose
        self._clock = clock

    def run(self) -> ReleaseResult:
        """Run the whole release flow once.

        Returns:
            What was tagged and announced.

        Raises:
            SkipRelease: If this trigger should not produce a tag.
            AutotaggerError: On any fatal condition. A comment failure
                after the tag was created is still fatal; the tag stays.
        """
        event = self._load_event()
        sha = event.pull_request.merge_commit_sha
        if not sha:
            raise EventError("Could not find the merge commit")

        tagging = self.config.tagging

        with self._client_factory(self.config, event) as client:
            last = resolve_last_version(client, tagging.tag_prefix, verbose=self.verbose)
            console.print(f"Last version: [bold]{escape(str(last))}[/bold]")

            if tagging.gated:
                base = tagging.tag_prefix + last.tag_text
                if not should_tag(client, base, sha, tagging.file_pattern):
                    raise SkipRelease("No changes matching pattern. This code won't be tagged.")

            now = self._clock() if self._clock else None
            version = compute_next_version(last, tagging, sha, now)

            client.create_tag_ref(version, sha)
            console.print(f"Tagged version [green]{escape(version)}[/green]")

            comment = COMMENT_TEMPLATE.format(version=version)
            client.create_pr_comment(event.pull_request.number, comment)

        return ReleaseResult(
            version=version,
            previous_version=str(last),
            sha=sha,
            pull_request=event.pull_request.number,
            comment=comment,
        )

    def _load_event(self) -> PullRequestEvent:
        """Check the trigger and credentials, then load a merged-PR event."""
        github = self.config.github

        # Limit this action to pull requests only
        if github.event_name != PULL_REQUEST_EVENT:
            raise SkipRelease(f"Ignoring trigger {github.event_name}")

        if not github.token:
            raise ConfigError("You must enable GITHUB_TOKEN access for this action")

        event = load_event(github.event_path)
        if not event.is_merged_close:
            raise SkipRelease(
                f"PR not ready to tag (action: {event.action}, "
                f"merged: {str(event.pull_request.merged).lower()})"
            )
        return event


def run_release(
    config: AppConfig,
    client_factory: ClientFactory | None = None,
    verbose: bool = False,
) -> ReleaseResult:
    """Run the release flow with the given configuration."""
    return ReleaseTagger(config, client_factory=client_factory, verbose=verbose).run()
