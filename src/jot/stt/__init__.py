"""Speech-to-text module for Jot.

Provides transcription through a hosted API or a mock implementation.
"""

from typing import TYPE_CHECKING

from .mock import MockTranscriber
from .transcriber import TranscriptionError, TranscriptionResult, Transcriber

if TYPE_CHECKING:
    from ..config import STTConfig


def create_transcriber(
    config: "STTConfig | None" = None,
    use_mock: bool = False,
) -> Transcriber:
    """Create a transcriber instance.

    Args:
        config: STT configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        Transcriber implementation

    Raises:
        ValueError: If the provider is unknown or its API key is missing.
    """
    if use_mock or (config is not None and config.provider == "mock"):
        return MockTranscriber()

    from .hosted import HostedTranscriber

    if config is None:
        return HostedTranscriber()

    if config.provider != "openai":
        raise ValueError(f"Unknown STT provider: {config.provider}")

    return HostedTranscriber(
        model=config.model,
        api_url=config.api_url,
        timeout=config.timeout_seconds,
    )


__all__ = [
    "MockTranscriber",
    "TranscriptionError",
    "TranscriptionResult",
    "Transcriber",
    "create_transcriber",
]
