"""Resolve the latest released version from a repository's tags."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.markup import escape

from autotagger.errors import NoVersionsFoundError
from autotagger.versioning.models import (
    ZERO_VERSION,
    InvalidVersionError,
    SemanticVersion,
    TagPage,
)

TAG_REF_PREFIX = "refs/tags/"

console = Console()


class TagSource(Protocol):
    """Anything that can list tag names one page at a time."""

    def fetch_tag_page(self, page: int) -> TagPage: ...


def strip_tag_name(name: str, prefix: str = "") -> str | None:
    """Strip ``refs/tags/`` and the configured prefix from a tag name.

    Returns:
        The remaining version text, or None if a prefix is configured and
        the tag does not carry it.
    """
    if name.startswith(TAG_REF_PREFIX):
        name = name[len(TAG_REF_PREFIX) :]
    if prefix:
        if not name.startswith(prefix):
            return None
        name = name[len(prefix) :]
    return name


def resolve_last_version(
    tag_source: TagSource,
    prefix: str = "",
    verbose: bool = False,
) -> SemanticVersion:
    """Find the highest semantic version among all tags.

    Pages are fetched sequentially, starting at 1, until the source reports
    there are no more. Tags that don't carry the prefix or don't parse are
    ignored. Only a strictly greater version replaces the current maximum,
    so the first tag seen wins among duplicates.

    Args:
        tag_source: Paginated source of tag names.
        prefix: Prefix tags must start with (after ``refs/tags/``).
        verbose: Print every ref examined.

    Returns:
        The highest version found.

    Raises:
        NoVersionsFoundError: If no tag parses to a version above 0.0.0.
    """
    last = ZERO_VERSION
    page = 1

    while True:
        tag_page = tag_source.fetch_tag_page(page)

        for name in tag_page.names:
            if verbose:
                console.print(f"[dim]Ref:[/dim] {escape(name)}")

            tag = strip_tag_name(name, prefix)
            if tag is None:
                continue

            try:
                version = SemanticVersion.parse(tag)
            except InvalidVersionError:
                console.print(f"[yellow]Tag {escape(tag)} is not a valid semver, ignoring[/yellow]")
                continue

            if version > last:
                if verbose:
                    console.print(f"Found newer version: {escape(str(version))}")
                last = version

        if not tag_page.has_more:
            break
        page += 1

    if last == ZERO_VERSION:
        raise NoVersionsFoundError(prefix)

    return last
