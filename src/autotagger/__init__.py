"""autotagger - tag merged pull requests with the next patch version."""

from autotagger._version import __version__

__all__ = ["__version__"]
