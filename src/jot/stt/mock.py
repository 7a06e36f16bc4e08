"""Mock transcriber for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from ..audio.capture import AudioClip
from .transcriber import TranscriptionError, TranscriptionResult


class MockTranscriber:
    """Mock transcriber returning predetermined text."""

    def __init__(self, text: str = "") -> None:
        """Initialize mock transcriber.

        Args:
            text: Transcript returned until changed
        """
        self._response_text = text
        self._call_count = 0
        self._error_message: str | None = None

    def set_response(self, text: str) -> None:
        """Set the text to return on next transcription."""
        self._response_text = text
        self._error_message = None

    def set_error(self, message: str) -> None:
        """Set an error to raise on next transcription."""
        self._error_message = message

    def transcribe(self, clip: AudioClip) -> TranscriptionResult:
        """Return preset transcription result."""
        self._call_count += 1

        if self._error_message:
            raise TranscriptionError(self._error_message)

        return TranscriptionResult(text=self._response_text, model="mock", latency_ms=0)

    @property
    def call_count(self) -> int:
        """Get number of transcribe calls."""
        return self._call_count


__all__ = ["MockTranscriber"]
