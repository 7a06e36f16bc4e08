"""Language understanding module for Jot.

Provides Claude-backed inference or a mock implementation.
"""

from typing import TYPE_CHECKING

from .errors import (
    LLMAPIError,
    LLMAuthError,
    LLMConnectivityError,
    LLMError,
    LLMTimeoutError,
)
from .mock import MockLanguageModel
from .model import LanguageModel, LLMResponse

if TYPE_CHECKING:
    from ..config import LLMConfig


def create_language_model(
    config: "LLMConfig | None" = None,
    use_mock: bool = False,
) -> LanguageModel:
    """Create a language model instance.

    Args:
        config: LLM configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        LanguageModel implementation

    Raises:
        ValueError: If the provider is unknown or its API key is missing.
    """
    if use_mock or (config is not None and config.provider == "mock"):
        return MockLanguageModel()

    if config is not None and config.provider != "claude":
        raise ValueError(f"Unknown LLM provider: {config.provider}")

    from .claude import ClaudeConfig, ClaudeLanguageModel

    if config is None:
        return ClaudeLanguageModel(ClaudeConfig.from_env())

    return ClaudeLanguageModel(
        ClaudeConfig.from_env(
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            timeout_seconds=config.timeout_seconds,
        )
    )


__all__ = [
    "LLMAPIError",
    "LLMAuthError",
    "LLMConnectivityError",
    "LLMError",
    "LLMResponse",
    "LLMTimeoutError",
    "LanguageModel",
    "MockLanguageModel",
    "create_language_model",
]
