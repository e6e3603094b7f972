"""Error taxonomy for console requests."""

from __future__ import annotations

DEFAULT_FETCH_FALLBACK = "Database connection failed"
DEFAULT_MUTATION_FALLBACK = "Something went wrong. Please try again."


class ConsoleError(Exception):
    """Base class for errors surfaced to the console user."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class FetchError(ConsoleError):
    """Raised when a GET request fails or returns an unusable body."""


class NetworkError(FetchError):
    """Raised when a GET request could not complete at all."""

    def __init__(self, message: str = DEFAULT_FETCH_FALLBACK):
        super().__init__(message, status_code=None)


class MutationError(ConsoleError):
    """Raised when a create/update/delete/transition request fails."""


class ValidationError(MutationError):
    """The backend rejected the request (4xx); message is shown verbatim."""


class ServerError(MutationError):
    """The backend failed (5xx) or could not be reached."""
