"""Mock language model for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from .errors import LLMError
from .model import LLMResponse


class MockLanguageModel:
    """Mock language model returning preset responses."""

    def __init__(self, response_text: str = "{}") -> None:
        """Initialize mock language model.

        Args:
            response_text: Text returned by generate until changed
        """
        self._response_text = response_text
        self._call_count = 0
        self._error: LLMError | None = None
        self._prompts: list[tuple[str | None, str]] = []

    def set_response(self, text: str) -> None:
        """Set the response to return on next generation."""
        self._response_text = text
        self._error = None

    def set_error(self, error: LLMError) -> None:
        """Set an error to raise on next generation."""
        self._error = error

    def generate(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Return preset response."""
        self._call_count += 1
        self._prompts.append((system, prompt))

        if self._error is not None:
            raise self._error

        return LLMResponse(
            text=self._response_text,
            tokens_used=len(self._response_text.split()) + len(prompt.split()),
            model="mock-model",
            latency_ms=0,
        )

    @property
    def call_count(self) -> int:
        """Get number of generate calls."""
        return self._call_count

    @property
    def last_system_prompt(self) -> str | None:
        """Get the system prompt of the most recent call."""
        return self._prompts[-1][0] if self._prompts else None

    @property
    def last_prompt(self) -> str | None:
        """Get the user prompt of the most recent call."""
        return self._prompts[-1][1] if self._prompts else None


__all__ = ["MockLanguageModel"]
