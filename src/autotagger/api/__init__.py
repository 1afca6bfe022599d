"""Shared API client utilities."""

from autotagger.api.base import (
    APIAuthError,
    APIConflictError,
    APIError,
    APINotFoundError,
    APIRateLimitError,
    BaseAPIClient,
)

__all__ = [
    "APIError",
    "APIAuthError",
    "APIConflictError",
    "APINotFoundError",
    "APIRateLimitError",
    "BaseAPIClient",
]
