"""HTTP client for the Jot service.

Device-side counterpart of jot.server: uploads a recording together with
the local notes and sections, and decodes the reply. Implements the
VoiceBackend interface so the pipeline can run against either the
in-process engine or a remote service.
"""

import json
import logging
import time
from collections.abc import Sequence
from typing import Any

import httpx

from ..audio.capture import AudioClip
from ..commands.interpreter import CommandResult
from ..errors import JotError, NoAudioError
from ..notes.models import CustomSection, Note, NoteDraft

logger = logging.getLogger(__name__)

API_TIMEOUT = 60.0  # seconds


class APIError(JotError):
    """Raised when the Jot service cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotesAPIClient:
    """Client for the `/transcribe` and `/query` endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = API_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Service root, e.g. "http://localhost:5000".
            timeout: Request timeout in seconds.
            client: Optional preconfigured HTTP client (for tests).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def process_capture(
        self,
        clip: AudioClip,
        sections: Sequence[CustomSection],
        timezone: str,
    ) -> list[NoteDraft]:
        """Upload a recording and return the extracted drafts.

        Raises:
            NoAudioError: If the clip is empty
            APIError: On network failure, error status or a malformed reply
        """
        data = self._post(
            "/transcribe",
            clip,
            {
                "customSections": json.dumps([s.to_prompt_dict() for s in sections]),
                "timezone": timezone,
            },
        )
        notes = data.get("notes")
        if not isinstance(notes, list):
            raise APIError("Service reply has no notes list")
        return [NoteDraft.from_dict(item) for item in notes if isinstance(item, dict)]

    def process_query(
        self,
        clip: AudioClip,
        notes: Sequence[Note],
        sections: Sequence[CustomSection],
        timezone: str,
    ) -> CommandResult:
        """Upload a spoken query and return the interpreted command.

        Raises:
            NoAudioError: If the clip is empty
            APIError: On network failure, error status or a malformed reply
        """
        data = self._post(
            "/query",
            clip,
            {
                "notes": json.dumps([n.to_dict() for n in notes]),
                "customSections": json.dumps([s.to_prompt_dict() for s in sections]),
                "timezone": timezone,
            },
        )
        return CommandResult.from_dict(data)

    def _post(self, path: str, clip: AudioClip, fields: dict[str, str]) -> dict[str, Any]:
        if clip.is_empty:
            raise NoAudioError("No audio file provided")

        url = f"{self._base_url}{path}"
        files = {"audio": (clip.filename, clip.data, clip.content_type)}
        start_time = time.time()

        try:
            if self._client is not None:
                response = self._client.post(url, files=files, data=fields)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(url, files=files, data=fields)
        except httpx.TimeoutException as e:
            logger.warning(f"Request to {path} timed out: {e}")
            raise APIError(f"Request timed out after {self._timeout} seconds") from e
        except httpx.RequestError as e:
            logger.warning(f"Request to {path} failed: {e}")
            raise APIError(f"Failed to reach Jot service: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"{path} returned {response.status_code}: {message}")
            raise APIError(
                message or f"Service returned HTTP {response.status_code}", response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise APIError(
                "Service returned invalid JSON", status_code=response.status_code
            ) from e

        if not isinstance(data, dict):
            raise APIError("Service reply is not a JSON object", response.status_code)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(f"{path} completed in {elapsed_ms}ms")
        return data


__all__ = ["API_TIMEOUT", "APIError", "NotesAPIClient"]
