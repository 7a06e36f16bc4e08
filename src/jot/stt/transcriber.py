"""Transcriber protocol and data classes.

Defines the interface for the speech-to-text gateway.
"""

from dataclasses import dataclass
from typing import Protocol

from ..audio.capture import AudioClip
from ..errors import JotError


class TranscriptionError(JotError):
    """Raised when the speech-to-text service fails or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize transcription error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


@dataclass
class TranscriptionResult:
    """Result of speech-to-text transcription.

    Attributes:
        text: Transcribed text
        model: Model that produced it
        latency_ms: Round-trip time in milliseconds
    """

    text: str
    model: str
    latency_ms: int


class Transcriber(Protocol):
    """Interface for speech-to-text transcription."""

    def transcribe(self, clip: AudioClip) -> TranscriptionResult:
        """Transcribe an audio clip to text.

        Args:
            clip: Recorded audio

        Returns:
            TranscriptionResult with transcribed text

        Raises:
            TranscriptionError: If transcription fails
        """
        ...


__all__ = ["TranscriptionError", "TranscriptionResult", "Transcriber"]
