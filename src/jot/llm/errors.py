"""Error types for the language-understanding service.

Raised only for transport-level failures. Malformed model output is
handled by the callers' fallback defaults instead.
"""

from ..errors import JotError


class LLMError(JotError):
    """Base exception for language model errors."""

    pass


class LLMTimeoutError(LLMError):
    """Raised when the request times out."""

    pass


class LLMAPIError(LLMError):
    """Raised when the service returns an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class LLMAuthError(LLMError):
    """Raised when authentication fails."""

    pass


class LLMConnectivityError(LLMError):
    """Raised when the service cannot be reached."""

    pass


__all__ = [
    "LLMAPIError",
    "LLMAuthError",
    "LLMConnectivityError",
    "LLMError",
    "LLMTimeoutError",
]
