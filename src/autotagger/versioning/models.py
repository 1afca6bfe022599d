"""Data models for version resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

import semver
from pydantic import BaseModel, Field

# Leading "v" and a dotted numeric core of any length; the remainder
# (pre-release and build metadata) is validated by semver.
_VERSION_RE = re.compile(r"^[vV]?(?P<core>\d+(?:\.\d+)*)(?P<rest>[-+].*)?$")


class InvalidVersionError(ValueError):
    """A string is not a valid semantic version."""

    pass


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """A semantic version with one or more numeric segments.

    Ordering follows semver precedence over the zero-padded numeric segments
    and the pre-release. Build metadata is carried along but never compared.
    ``original`` keeps the text the version was parsed from so the exact tag
    name can be rebuilt.
    """

    segments: tuple[int, ...]
    prerelease: str | None = None
    build: str | None = None
    original: str = ""

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version such as ``v1.2.3``, ``1.2`` or ``1.2.3-rc.1+build.5``.

        Raises:
            InvalidVersionError: If the text is not a semantic version.
        """
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise InvalidVersionError(f"{text!r} is not a valid semantic version")

        segments = tuple(int(s) for s in match.group("core").split("."))
        padded = _pad(segments)
        try:
            info = semver.Version.parse(
                f"{padded[0]}.{padded[1]}.{padded[2]}{match.group('rest') or ''}"
            )
        except ValueError as e:
            raise InvalidVersionError(f"{text!r} is not a valid semantic version") from e

        return cls(
            segments=segments,
            prerelease=info.prerelease,
            build=info.build,
            original=text.strip(),
        )

    @property
    def normalized_segments(self) -> tuple[int, ...]:
        """Segments right-padded with zeros to at least three entries."""
        return _pad(self.segments)

    @property
    def major(self) -> int:
        return self.normalized_segments[0]

    @property
    def minor(self) -> int:
        return self.normalized_segments[1]

    @property
    def patch(self) -> int:
        return self.normalized_segments[2]

    @property
    def tag_text(self) -> str:
        """Text to use when rebuilding the tag name this version came from."""
        return self.original or f"v{self}"

    def _compare(self, other: SemanticVersion) -> int:
        width = max(len(self.segments), len(other.segments), 3)
        mine = self.segments + (0,) * (width - len(self.segments))
        theirs = other.segments + (0,) * (width - len(other.segments))
        if mine != theirs:
            return -1 if mine < theirs else 1
        # Numerically equal: semver decides on the pre-release alone.
        return semver.Version(0, 0, 0, prerelease=self.prerelease).compare(
            semver.Version(0, 0, 0, prerelease=other.prerelease)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        stripped = list(self.segments)
        while len(stripped) > 3 and stripped[-1] == 0:
            stripped.pop()
        return hash((_pad(tuple(stripped)), self.prerelease))

    def __str__(self) -> str:
        text = ".".join(str(s) for s in self.normalized_segments)
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def _pad(segments: tuple[int, ...]) -> tuple[int, ...]:
    """Right-pad segments with zeros to three entries; never truncate."""
    if len(segments) >= 3:
        return segments
    return segments + (0,) * (3 - len(segments))


ZERO_VERSION = SemanticVersion(segments=(0, 0, 0), original="v0.0.0")


class TagPage(BaseModel):
    """One page of tag names from a hosting service."""

    names: list[str] = Field(default_factory=list)
    has_more: bool = False
