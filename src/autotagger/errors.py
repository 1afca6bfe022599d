"""Exception hierarchy for autotagger.

Everything that should stop a run with the failure exit code derives from
``AutotaggerError``. ``SkipRelease`` is deliberately outside that tree: it
means the run chose not to tag and maps to the no-op exit code.
"""

from __future__ import annotations


class AutotaggerError(Exception):
    """Base exception for fatal autotagger errors."""

    pass


class ConfigError(AutotaggerError):
    """Invalid or incomplete configuration (missing token, bad pattern...)."""

    pass


class EventError(AutotaggerError):
    """The triggering event payload is missing, unreadable or incomplete."""

    pass


class NoVersionsFoundError(AutotaggerError):
    """No tag in the repository parses as a semantic version."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        message = "could not find any versions"
        if prefix:
            message += f" with prefix {prefix!r}"
        super().__init__(message)


class SkipRelease(Exception):
    """The run decided not to tag. Not an error.

    Attributes:
        reason: Human readable explanation shown to the user.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
