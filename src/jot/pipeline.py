"""Voice interaction pipeline.

Runs one interaction at a time: recording -> backend -> stores ->
reminders. Every upstream call finishes before the first store write,
so a failed call leaves the notes untouched.
"""

import logging
from collections.abc import Callable

from .audio.capture import AudioCapture, AudioClip
from .backend import VoiceBackend
from .commands.dispatch import CommandDispatcher, DispatchOutcome
from .commands.interpreter import CommandResult
from .config.settings import Settings
from .errors import NoAudioError, PipelineBusyError
from .notes.models import Note
from .notes.store import NoteStore, SectionStore
from .reminders.scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


class VoicePipeline:
    """Coordinates voice capture and voice commands against the stores."""

    def __init__(
        self,
        backend: VoiceBackend,
        notes: NoteStore,
        sections: SectionStore,
        dispatcher: CommandDispatcher,
        scheduler: ReminderScheduler | None = None,
        get_settings: Callable[[], Settings] = Settings,
    ) -> None:
        """Initialize the pipeline.

        Args:
            backend: Transcription and understanding backend
            notes: Note store
            sections: Section store
            dispatcher: Applies command results to the stores
            scheduler: Reminder scheduler for new notes, if enabled
            get_settings: Returns the current user settings
        """
        self._backend = backend
        self._notes = notes
        self._sections = sections
        self._dispatcher = dispatcher
        self._scheduler = scheduler
        self._get_settings = get_settings
        self._busy = False
        self._last_outcome: DispatchOutcome | None = None

    @property
    def is_busy(self) -> bool:
        """Return True while an interaction is being processed."""
        return self._busy

    @property
    def last_outcome(self) -> DispatchOutcome | None:
        """What the most recent query changed, if any query has run."""
        return self._last_outcome

    def capture_notes(self, clip: AudioClip) -> list[Note]:
        """Create notes from a recording and schedule their reminders.

        Raises:
            NoAudioError: If the clip is empty
            PipelineBusyError: If another interaction is in progress
            JotError: If transcription, understanding or persistence fails
        """
        self._begin(clip)
        try:
            drafts = self._backend.process_capture(
                clip, self._sections.sections, self._get_settings().timezone
            )

            created = []
            for draft in drafts:
                note = self._notes.add_note(draft)
                created.append(note)
                if self._scheduler is not None:
                    self._scheduler.schedule(note)

            logger.info(f"Captured {len(created)} notes")
            return created
        finally:
            self._busy = False

    def ask(self, clip: AudioClip) -> CommandResult:
        """Answer a spoken query and apply any action it requests.

        Raises:
            NoAudioError: If the clip is empty
            PipelineBusyError: If another interaction is in progress
            JotError: If transcription, understanding or persistence fails
        """
        self._begin(clip)
        try:
            result = self._backend.process_query(
                clip,
                self._notes.notes,
                self._sections.sections,
                self._get_settings().timezone,
            )
            self._last_outcome = self._dispatcher.apply(result)
            return result
        finally:
            self._busy = False

    def record(self, capture: AudioCapture) -> AudioClip:
        """Record one clip from a capture device.

        Raises:
            PipelineBusyError: If another interaction is in progress
        """
        if self._busy:
            raise PipelineBusyError("A voice interaction is already in progress")
        handle = capture.start()
        return capture.stop(handle)

    def _begin(self, clip: AudioClip) -> None:
        if clip.is_empty:
            raise NoAudioError("No audio file provided")
        if self._busy:
            raise PipelineBusyError("A voice interaction is already in progress")
        self._busy = True


__all__ = ["VoicePipeline"]
