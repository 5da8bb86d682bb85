"""Typed failures raised by the generative media client."""
from __future__ import annotations


class MediaServiceError(RuntimeError):
    """Base class for every media client failure.

    ``kind`` is a stable machine-readable tag; ``message`` is the human-readable
    text shown to the user.
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MediaServiceError):
    """Raised when Gemini credentials are not configured."""

    kind = "configuration"


class InvalidInputError(MediaServiceError):
    """Raised before any upstream call when the request cannot be built."""

    kind = "invalid_input"


class EmptyResultError(MediaServiceError):
    """Raised when the service answered but produced nothing usable."""

    kind = "empty_result"


class UpstreamError(MediaServiceError):
    """Raised when the call to the model service itself fails."""

    kind = "upstream"

    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(message)
        self.operation = operation


__all__ = [
    "ConfigurationError",
    "EmptyResultError",
    "InvalidInputError",
    "MediaServiceError",
    "UpstreamError",
]
