"""Version resolution and next-version calculation."""

from autotagger.versioning.decision import DiffSource, should_tag
from autotagger.versioning.models import (
    ZERO_VERSION,
    InvalidVersionError,
    SemanticVersion,
    TagPage,
)
from autotagger.versioning.next_version import (
    compute_next_version,
    next_build_version,
    next_version,
)
from autotagger.versioning.resolver import TagSource, resolve_last_version, strip_tag_name

__all__ = [
    # Models
    "SemanticVersion",
    "InvalidVersionError",
    "TagPage",
    "ZERO_VERSION",
    # Resolution
    "TagSource",
    "resolve_last_version",
    "strip_tag_name",
    # Decision
    "DiffSource",
    "should_tag",
    # Next version
    "next_version",
    "next_build_version",
    "compute_next_version",
]
