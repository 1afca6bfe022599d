"""Base classes for API clients.

Provides the exception hierarchy shared by hosting-service clients and a
base client that maps HTTP responses onto it.
"""

from __future__ import annotations

from typing import Any, Self

import httpx

from autotagger.errors import AutotaggerError


class APIError(AutotaggerError):
    """Base exception for all API errors.

    Service-specific errors (e.g. GitHubError) inherit from this class so
    callers can catch any collaborator failure in one place.
    """

    pass


class APIAuthError(APIError):
    """Authentication error (missing or invalid token)."""

    pass


class APINotFoundError(APIError):
    """Resource not found (404)."""

    pass


class APIConflictError(APIError):
    """The resource already exists or conflicts with the current state (409)."""

    pass


class APIRateLimitError(APIError):
    """Rate limit exceeded (429, or 403 with an exhausted quota).

    Attributes:
        retry_after: Suggested wait time in seconds before retrying.
    """

    def __init__(self, retry_after: int | None = None, message: str | None = None) -> None:
        self.retry_after = retry_after
        if message is None:
            message = f"Rate limit exceeded. Retry after {retry_after}s"
        super().__init__(message)


class BaseAPIClient:
    """Base class for API clients sharing the HTTP error mapping.

    Subclasses must set:
        - _error_cls: The base error class for this API (e.g., GitHubError)
        - _auth_error_cls: Auth error class
        - _not_found_cls: Not-found error class
        - _conflict_cls: Conflict error class
        - _rate_limit_cls: Rate-limit error class
        - _error_message_key: JSON key for error message (e.g., "message")
        - _api_name: Human name for error messages (e.g., "GitHub")
    """

    _error_cls: type[APIError] = APIError
    _auth_error_cls: type[APIAuthError] = APIAuthError
    _not_found_cls: type[APINotFoundError] = APINotFoundError
    _conflict_cls: type[APIConflictError] = APIConflictError
    _rate_limit_cls: type[APIRateLimitError] = APIRateLimitError
    _error_message_key: str = "message"
    _api_name: str = "API"

    def __init__(self) -> None:
        self._client: httpx.Client | None = None

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle API response and raise appropriate errors."""
        if response.status_code in (200, 201):
            try:
                return response.json()
            except ValueError as e:
                raise self._error_cls(f"{self._api_name} returned invalid JSON: {e}") from e

        if response.status_code == 401:
            raise self._auth_error_cls(f"{self._api_name} authentication failed")

        if response.status_code == 404:
            raise self._not_found_cls("Resource not found")

        if response.status_code == 409:
            raise self._conflict_cls(f"{self._api_name} conflict: {self._error_message(response)}")

        if response.status_code == 429 or (
            response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            raise self._rate_limit_cls(_parse_retry_after(response.headers.get("Retry-After")))

        raise self._error_cls(
            f"{self._api_name} API error ({response.status_code}): {self._error_message(response)}"
        )

    def _error_message(self, response: httpx.Response) -> str:
        """Extract the error message from a failed response."""
        try:
            error_data = response.json()
            return str(error_data.get(self._error_message_key, "Unknown error"))
        except Exception:
            return response.text or "Unknown error"


def _parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header given in seconds; HTTP dates are ignored."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None
