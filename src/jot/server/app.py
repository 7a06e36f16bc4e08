"""FastAPI application exposing the capture and query endpoints.

Both endpoints take a multipart upload: the recorded `audio` file plus
JSON-encoded context fields. The service holds no note state; the device
sends its notes and sections with every request.
"""

import json
import logging
from typing import Any

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from .. import __version__
from ..audio.capture import AudioClip
from ..backend import VoiceBackend
from ..errors import JotError, NoAudioError, user_message
from ..llm.errors import LLMError
from ..notes.models import CustomSection, Note
from ..stt.transcriber import TranscriptionError
from ..timefmt import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

NO_AUDIO_MESSAGE = "No audio file provided"


class FormFieldError(JotError):
    """Raised when a multipart form field cannot be decoded."""

    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the `{"error": message}` reply used by every endpoint."""
    return JSONResponse(status_code=status_code, content={"error": message})


def status_for(error: Exception) -> int:
    """Map an error raised while handling a request to an HTTP status."""
    if isinstance(error, (NoAudioError, FormFieldError)):
        return 400
    if isinstance(error, (TranscriptionError, LLMError)):
        return 502
    return 500


def parse_json_list(raw: str | None, field_name: str) -> list[dict[str, Any]]:
    """Decode a JSON array form field into a list of objects.

    Non-object items are dropped; a missing or blank field is an empty list.

    Raises:
        FormFieldError: If the field is not valid JSON or not an array.
    """
    if raw is None or not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FormFieldError(f"Invalid JSON in {field_name}") from e
    if not isinstance(value, list):
        raise FormFieldError(f"{field_name} must be a JSON array")
    return [item for item in value if isinstance(item, dict)]


def parse_sections(raw: str | None) -> list[CustomSection]:
    sections = [CustomSection.from_dict(item) for item in parse_json_list(raw, "customSections")]
    return [s for s in sections if s.name.strip()]


def parse_notes(raw: str | None) -> list[Note]:
    notes = []
    for item in parse_json_list(raw, "notes"):
        try:
            notes.append(Note.from_dict(item))
        except (KeyError, TypeError) as e:
            raise FormFieldError("Every note must have an id") from e
    return notes


def read_clip(audio: UploadFile | None) -> AudioClip:
    """Read an uploaded file into a clip.

    Raises:
        NoAudioError: If no file or an empty file was uploaded.
    """
    if audio is None:
        raise NoAudioError(NO_AUDIO_MESSAGE)
    clip = AudioClip(
        data=audio.file.read(),
        filename=audio.filename or "audio.m4a",
        content_type=audio.content_type or "audio/mp4",
    )
    if clip.is_empty:
        raise NoAudioError(NO_AUDIO_MESSAGE)
    return clip


def create_app(backend: VoiceBackend, default_timezone: str = DEFAULT_TIMEZONE) -> FastAPI:
    """Create the HTTP service.

    Args:
        backend: Backend that performs transcription and understanding.
        default_timezone: Timezone used when a request omits one.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Jot",
        description="Voice capture and voice commands for notes",
        version=__version__,
    )

    @app.post("/transcribe")
    def transcribe(
        audio: UploadFile | None = File(None),
        custom_sections: str | None = Form(None, alias="customSections"),
        timezone: str | None = Form(None),
    ) -> Any:
        try:
            clip = read_clip(audio)
            sections = parse_sections(custom_sections)
            drafts = backend.process_capture(clip, sections, timezone or default_timezone)
        except NoAudioError:
            return error_response(400, NO_AUDIO_MESSAGE)
        except JotError as e:
            logger.warning(f"Transcribe request failed: {e}")
            return error_response(status_for(e), user_message(e))

        logger.info(f"Transcribe request produced {len(drafts)} notes")
        return {"notes": [d.to_dict() for d in drafts]}

    @app.post("/query")
    def query(
        audio: UploadFile | None = File(None),
        notes: str | None = Form(None),
        custom_sections: str | None = Form(None, alias="customSections"),
        timezone: str | None = Form(None),
    ) -> Any:
        try:
            clip = read_clip(audio)
            note_list = parse_notes(notes)
            sections = parse_sections(custom_sections)
            result = backend.process_query(
                clip, note_list, sections, timezone or default_timezone
            )
        except NoAudioError:
            return error_response(400, NO_AUDIO_MESSAGE)
        except JotError as e:
            logger.warning(f"Query request failed: {e}")
            return error_response(status_for(e), user_message(e))

        return result.to_dict()

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app


__all__ = [
    "FormFieldError",
    "create_app",
    "error_response",
    "parse_json_list",
    "parse_notes",
    "parse_sections",
    "read_clip",
    "status_for",
]
