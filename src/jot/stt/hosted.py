"""Hosted speech-to-text using an OpenAI-compatible transcription API.

Uploads the clip as multipart form data and returns the plain text.
"""

import logging
import os
import time

import httpx

from ..audio.capture import AudioClip
from .transcriber import TranscriptionError, TranscriptionResult

logger = logging.getLogger(__name__)

TRANSCRIPTION_API_URL = "https://api.openai.com/v1/audio/transcriptions"
TRANSCRIPTION_MODEL = "whisper-1"
TRANSCRIPTION_TIMEOUT = 60.0  # seconds


class HostedTranscriber:
    """Speech-to-text through a hosted Whisper-style endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = TRANSCRIPTION_MODEL,
        api_url: str = TRANSCRIPTION_API_URL,
        timeout: float = TRANSCRIPTION_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transcriber.

        Args:
            api_key: API key. If not provided, OPENAI_API_KEY is used.
            model: Transcription model name.
            api_url: Transcription endpoint.
            timeout: Request timeout in seconds.
            client: Optional preconfigured HTTP client (for tests).

        Raises:
            ValueError: If no API key is available.
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY", "").strip()
        if not self._api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is not set. "
                "Set it to use hosted transcription."
            )
        self._model = model
        self._api_url = api_url
        self._timeout = timeout
        self._client = client

    def transcribe(self, clip: AudioClip) -> TranscriptionResult:
        """Upload a clip and return its transcript.

        Raises:
            TranscriptionError: On timeout, network failure, error status or
                a reply without text.
        """
        start_time = time.time()
        try:
            response = self._post(clip)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Transcription timed out: {e}")
            raise TranscriptionError(
                f"Transcription timed out after {self._timeout} seconds."
            ) from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Transcription HTTP error {e.response.status_code}: {e.response.text}")
            raise TranscriptionError(
                "Transcription service returned an error.",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"Transcription request failed: {e}")
            raise TranscriptionError(f"Failed to reach transcription service: {e}") from e
        except ValueError as e:
            raise TranscriptionError("Transcription service returned invalid JSON.") from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise TranscriptionError("Transcription service returned no text.")

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Transcribed {len(clip.data)} bytes in {latency_ms}ms")
        return TranscriptionResult(text=text.strip(), model=self._model, latency_ms=latency_ms)

    def _post(self, clip: AudioClip) -> httpx.Response:
        kwargs = {
            "headers": {"Authorization": f"Bearer {self._api_key}"},
            "files": {"file": (clip.filename, clip.data, clip.content_type)},
            "data": {"model": self._model},
        }
        if self._client is not None:
            return self._client.post(self._api_url, **kwargs)

        with httpx.Client(timeout=self._timeout) as client:
            return client.post(self._api_url, **kwargs)


__all__ = ["HostedTranscriber"]
