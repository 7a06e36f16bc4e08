"""Language model protocol and data classes.

Defines the interface the note extractor and command interpreter use
to call the language-understanding service.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class LLMResponse:
    """Response from language model.

    Attributes:
        text: Generated response text
        tokens_used: Number of tokens consumed
        model: Model identifier
        latency_ms: Response latency in milliseconds
    """

    text: str
    tokens_used: int
    model: str
    latency_ms: int


class LanguageModel(Protocol):
    """Interface for language model inference."""

    def generate(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate response for prompt.

        Args:
            prompt: User message text
            system: Optional system instructions
            max_tokens: Maximum tokens to generate (None for the configured default)
            temperature: Sampling temperature (None for the configured default)

        Returns:
            LLMResponse with generated text

        Raises:
            LLMError: If the service cannot produce a response
        """
        ...


__all__ = ["LLMResponse", "LanguageModel"]
