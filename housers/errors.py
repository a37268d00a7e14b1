"""Error taxonomy shared by the clients and services."""
from __future__ import annotations


class HousersError(RuntimeError):
    """Base class for recoverable failures raised by this package."""


class NetworkError(HousersError):
    """Raised when the backend is unreachable or answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchError(NetworkError):
    """Raised when loading the notification list fails."""


class NotFoundError(HousersError):
    """Raised when a single-row lookup yields no rows."""


class ValidationError(HousersError):
    """Raised for malformed user input; ``message`` is safe to show inline."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


__all__ = ["HousersError", "NetworkError", "FetchError", "NotFoundError", "ValidationError"]
