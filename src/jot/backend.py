"""Voice backends.

A backend turns a recorded clip into note drafts or a command result.
LocalBackend runs transcription and understanding in-process; the HTTP
client in jot.api does the same through the Jot service.
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from .audio.capture import AudioClip
from .commands.interpreter import CommandInterpreter, CommandResult
from .errors import NoAudioError
from .notes.extractor import NoteExtractor
from .notes.models import CustomSection, Note, NoteDraft
from .stt.transcriber import Transcriber
from .timefmt import local_now

if TYPE_CHECKING:
    from .config import JotConfig

logger = logging.getLogger(__name__)


class VoiceBackend(Protocol):
    """Interface for processing recorded voice interactions."""

    def process_capture(
        self,
        clip: AudioClip,
        sections: Sequence[CustomSection],
        timezone: str,
    ) -> list[NoteDraft]:
        """Turn a recording into note drafts.

        Raises:
            NoAudioError: If the clip is empty
            JotError: If transcription or understanding fails
        """
        ...

    def process_query(
        self,
        clip: AudioClip,
        notes: Sequence[Note],
        sections: Sequence[CustomSection],
        timezone: str,
    ) -> CommandResult:
        """Interpret a recorded query against the given notes.

        Raises:
            NoAudioError: If the clip is empty
            JotError: If transcription or understanding fails
        """
        ...


class LocalBackend:
    """Backend calling the transcriber and language model directly."""

    def __init__(
        self,
        transcriber: Transcriber,
        extractor: NoteExtractor,
        interpreter: CommandInterpreter,
    ) -> None:
        self._transcriber = transcriber
        self._extractor = extractor
        self._interpreter = interpreter

    def process_capture(
        self,
        clip: AudioClip,
        sections: Sequence[CustomSection],
        timezone: str,
    ) -> list[NoteDraft]:
        if clip.is_empty:
            raise NoAudioError("No audio file provided")

        transcript = self._transcriber.transcribe(clip).text
        logger.debug(f"Capture transcript: {transcript!r}")
        return self._extractor.extract(
            transcript, sections, now=local_now(timezone), timezone=timezone
        )

    def process_query(
        self,
        clip: AudioClip,
        notes: Sequence[Note],
        sections: Sequence[CustomSection],
        timezone: str,
    ) -> CommandResult:
        if clip.is_empty:
            raise NoAudioError("No audio file provided")

        transcript = self._transcriber.transcribe(clip).text
        logger.debug(f"Query transcript: {transcript!r}")
        return self._interpreter.interpret(
            transcript, notes, sections, local_now(timezone), timezone
        )


def create_local_backend(config: "JotConfig | None" = None, use_mocks: bool = False) -> LocalBackend:
    """Build an in-process backend from configuration.

    Args:
        config: Jot configuration
        use_mocks: Use mock transcriber and language model

    Returns:
        Configured LocalBackend

    Raises:
        ValueError: If a provider is unknown or its API key is missing.
    """
    from .llm import create_language_model
    from .stt import create_transcriber

    stt_config = config.stt if config is not None else None
    llm_config = config.llm if config is not None else None
    default_timezone = config.server.default_timezone if config is not None else None

    llm = create_language_model(llm_config, use_mock=use_mocks)
    return LocalBackend(
        transcriber=create_transcriber(stt_config, use_mock=use_mocks),
        extractor=NoteExtractor(llm, default_timezone=default_timezone),
        interpreter=CommandInterpreter(llm),
    )


__all__ = ["LocalBackend", "VoiceBackend", "create_local_backend"]
