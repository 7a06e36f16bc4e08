"""Per-note reminder scheduling.

Keeps at most one outstanding notification per note. The note-id to
notification-handle map is persisted so reminders can be cancelled
after a restart.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from ..config.settings import Settings
from ..notes.models import Note
from ..storage.blob import BlobStore
from .queue import Notification, NotificationQueue
from .triggers import compute_trigger_time

logger = logging.getLogger(__name__)

HANDLES_KEY = "reminder_handles"
BODY_MAX_LENGTH = 100


def truncate_text(text: str, max_length: int) -> str:
    """Shorten text to max_length characters, ending with "..." when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


class ReminderScheduler:
    """Schedules and cancels note reminders."""

    def __init__(
        self,
        queue: NotificationQueue,
        blob_store: BlobStore,
        get_settings: Callable[[], Settings] = Settings,
    ) -> None:
        """Initialize the scheduler.

        Args:
            queue: Notification queue that delivers reminders.
            blob_store: Store for the note-id to handle map.
            get_settings: Returns the current reminder settings.
        """
        self._queue = queue
        self._blob_store = blob_store
        self._get_settings = get_settings
        stored = blob_store.get(HANDLES_KEY)
        self._handles: dict[str, str] = stored if isinstance(stored, dict) else {}

    def handle_for(self, note_id: str) -> str | None:
        """Get the outstanding notification handle for a note."""
        return self._handles.get(note_id)

    def schedule(self, note: Note, now: datetime | None = None) -> Notification | None:
        """Schedule a reminder for a note, replacing any earlier one.

        Args:
            note: Note to remind about.
            now: Current time (defaults to now in the user's timezone).

        Returns:
            The scheduled notification, or None if the note needs no reminder.
        """
        trigger_at = compute_trigger_time(note, now, self._get_settings())
        if trigger_at is None:
            logger.debug(f"No reminder needed for note {note.id}")
            self.cancel(note.id)
            return None

        previous = self._handles.get(note.id)
        if previous is not None:
            self._queue.cancel(previous)

        notification = self._queue.create(
            note_id=note.id,
            title=note.title,
            body=truncate_text(note.raw_text, BODY_MAX_LENGTH),
            trigger_at=trigger_at,
        )
        self._save({**self._handles, note.id: notification.id})
        logger.info(f"Reminder for note {note.id} set for {trigger_at.isoformat()}")
        return notification

    def cancel(self, note_id: str) -> bool:
        """Cancel a note's outstanding reminder.

        Returns:
            True if a reminder was outstanding.
        """
        handle = self._handles.get(note_id)
        if handle is None:
            return False

        self._queue.cancel(handle)
        self._save({k: v for k, v in self._handles.items() if k != note_id})
        logger.debug(f"Cancelled reminder for note {note_id}")
        return True

    def _save(self, handles: dict[str, str]) -> None:
        self._blob_store.set(HANDLES_KEY, handles)
        self._handles = handles


__all__ = ["BODY_MAX_LENGTH", "HANDLES_KEY", "ReminderScheduler", "truncate_text"]
