"""Decide whether a merge should be tagged at all."""

from __future__ import annotations

import re
from typing import Protocol


class DiffSource(Protocol):
    """Anything that can list the files changed between two refs."""

    def compare_commits(self, base: str, head: str) -> list[str]: ...


def should_tag(
    diff_source: DiffSource,
    base_ref: str,
    merge_ref: str,
    file_pattern: re.Pattern[str],
) -> bool:
    """Check whether any file changed since the last tag matches the pattern.

    Collaborator errors propagate; they are never retried. The pattern is
    searched anywhere in each filename.
    """
    for filename in diff_source.compare_commits(base_ref, merge_ref):
        if file_pattern.search(filename):
            return True
    return False
