"""Next version calculation.

Only the patch segment is ever bumped. Major and minor releases are tagged
by hand.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from autotagger.versioning.models import SemanticVersion

if TYPE_CHECKING:
    from autotagger.config import TaggingConfig

SHORT_REF_LENGTH = 12


def _bump_patch(last: SemanticVersion) -> tuple[int, int, int]:
    major, minor, patch = last.normalized_segments[:3]
    return major, minor, patch + 1


def next_version(last: SemanticVersion, prefix: str = "") -> str:
    """Get the next patch version as ``{prefix}v{major}.{minor}.{patch}``.

    Pre-release and build metadata of ``last`` are dropped.

    Example:
        >>> next_version(SemanticVersion.parse("v1.2.3+2019-10-08.deadbeef"))
        'v1.2.4'
    """
    major, minor, patch = _bump_patch(last)
    return f"{prefix}v{major}.{minor}.{patch}"


def next_build_version(last: SemanticVersion, ref: str, now: datetime | None = None) -> str:
    """Get the next patch version with build metadata for traceability.

    Format: ``v{major}.{minor}.{patch}+{YYYY-MM-DD}.{ref[:12]}`` using the
    UTC date.
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is not None:
        now = now.astimezone(UTC)

    major, minor, patch = _bump_patch(last)
    return f"v{major}.{minor}.{patch}+{now.strftime('%Y-%m-%d')}.{ref[:SHORT_REF_LENGTH]}"


def compute_next_version(
    last: SemanticVersion,
    tagging: TaggingConfig,
    ref: str,
    now: datetime | None = None,
) -> str:
    """Get the next version in the shape selected by the tagging config."""
    if tagging.build_metadata:
        return next_build_version(last, ref, now)
    return next_version(last, tagging.tag_prefix)
