"""Claude-backed language model.

Calls the Anthropic Messages API and maps SDK failures to LLMError types.
"""

import logging
import os
import time
from dataclasses import dataclass

import anthropic

from .errors import LLMAPIError, LLMAuthError, LLMConnectivityError, LLMTimeoutError
from .model import LLMResponse

logger = logging.getLogger(__name__)


@dataclass
class ClaudeConfig:
    """Configuration for the Claude language model."""

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    temperature: float = 0.2
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls, **overrides: object) -> "ClaudeConfig":
        """Create config from environment variables.

        Args:
            **overrides: Field values that replace the defaults.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not set.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to use voice note understanding."
            )
        return cls(api_key=api_key, **overrides)  # type: ignore[arg-type]


class ClaudeLanguageModel:
    """Language model using the Claude API."""

    def __init__(self, config: ClaudeConfig) -> None:
        """Initialize the Claude client.

        Args:
            config: Configuration for the client.
        """
        self._config = config
        self._client = anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._config.model

    def generate(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Send one message to Claude and return the text reply.

        Raises:
            LLMTimeoutError: If the request times out.
            LLMAuthError: If authentication fails.
            LLMConnectivityError: If the network is unavailable.
            LLMAPIError: If the API returns an error status.
        """
        start_time = time.time()

        kwargs = {
            "model": self._config.model,
            "max_tokens": max_tokens or self._config.max_tokens,
            "temperature": self._config.temperature if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = self._client.messages.create(**kwargs)
        except anthropic.AuthenticationError as e:
            raise LLMAuthError("Invalid API key. Please check your ANTHROPIC_API_KEY.") from e
        except anthropic.APITimeoutError as e:
            # Timeout subclasses APIConnectionError, so it is caught first
            raise LLMTimeoutError(
                f"Request timed out after {self._config.timeout_seconds} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise LLMConnectivityError(f"Failed to connect to Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            raise LLMAPIError(f"API error: {e.message}", status_code=e.status_code) from e

        latency_ms = int((time.time() - start_time) * 1000)
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        logger.debug(f"Claude responded in {latency_ms}ms ({len(text)} chars)")

        return LLMResponse(
            text=text,
            tokens_used=response.usage.input_tokens + response.usage.output_tokens,
            model=response.model,
            latency_ms=latency_ms,
        )


__all__ = ["ClaudeConfig", "ClaudeLanguageModel"]
