"""Version calculation for autotagger.

autotagger releases itself with autotagger, so the version is the latest
``v*`` tag reachable from HEAD of the checkout the package lives in, never
the working directory. Outside a git checkout (e.g. inside the action's
container image) the base version is used.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

# Fallback when no tag can be read
BASE_VERSION = "1.0.0"


def _get_latest_tag() -> str | None:
    """Get the most recent ``v*`` tag reachable from HEAD.

    Returns:
        Tag name, or None if git is unavailable or there is no tag.
    """
    try:
        result = subprocess.run(
            ["git", "describe", "--tags", "--abbrev=0", "--match", "v[0-9]*"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=Path(__file__).resolve().parent,
        )
        if result.returncode == 0:
            return result.stdout.strip() or None
    except (subprocess.SubprocessError, OSError):
        pass
    return None


def get_version() -> str:
    """Get the full version string.

    Returns:
        Version without the leading "v" and build metadata (e.g., "1.0.4"),
        or BASE_VERSION if no tag is available.
    """
    tag = _get_latest_tag()
    if tag is None:
        return BASE_VERSION
    return tag[1:].split("+", 1)[0]


# Calculate version once at import time
__version__ = get_version()
