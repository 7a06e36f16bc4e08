"""Applying interpreted commands to the note and section stores.

Maps each command action to its store effect and keeps reminders in step:
completing, deleting or archiving a note cancels its reminder.
"""

import logging
from dataclasses import dataclass, field

from ..notes.models import DEFAULT_SECTION_ICON, CustomSection, Note
from ..notes.store import NoteStore, SectionStore
from ..reminders.scheduler import ReminderScheduler
from .interpreter import CommandAction, CommandResult

logger = logging.getLogger(__name__)


@dataclass
class DispatchOutcome:
    """What applying a command changed."""

    action: CommandAction | None
    affected_note_ids: list[str] = field(default_factory=list)
    created_section: CustomSection | None = None

    @property
    def changed(self) -> bool:
        """Return True if anything was modified."""
        return bool(self.affected_note_ids) or self.created_section is not None


class CommandDispatcher:
    """Performs note and section mutations with their reminder side effects."""

    def __init__(
        self,
        notes: NoteStore,
        sections: SectionStore,
        scheduler: ReminderScheduler | None = None,
        reschedule_on_unarchive: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            notes: Note store to mutate.
            sections: Section store to mutate.
            scheduler: Reminder scheduler, if reminders are enabled.
            reschedule_on_unarchive: Schedule a fresh reminder when a note is unarchived.
        """
        self._notes = notes
        self._sections = sections
        self._scheduler = scheduler
        self._reschedule_on_unarchive = reschedule_on_unarchive

    def apply(self, result: CommandResult) -> DispatchOutcome:
        """Apply an interpreted command.

        Matched notes are looked up again in the store, so notes that are
        already gone are skipped.

        Raises:
            PersistenceError: If a store write fails. Earlier writes are kept.
        """
        outcome = DispatchOutcome(action=result.action)

        if result.action is CommandAction.CREATE_SECTION:
            if result.section_name:
                outcome.created_section = self._sections.add_section(
                    result.section_name,
                    result.section_icon or DEFAULT_SECTION_ICON,
                    result.section_keywords or [],
                )
            return outcome

        if result.action is None:
            return outcome

        for matched in result.matched_notes:
            if result.action is CommandAction.COMPLETE:
                changed = self.complete_note(matched.id)
            elif result.action is CommandAction.DELETE:
                changed = self.delete_note(matched.id)
            else:
                changed = self.archive_note(matched.id)

            if changed:
                outcome.affected_note_ids.append(matched.id)

        logger.info(f"Applied {result.action.value} to {len(outcome.affected_note_ids)} notes")
        return outcome

    def complete_note(self, note_id: str) -> bool:
        """Mark a note done if it is not already, and cancel its reminder."""
        note = self._notes.get_note(note_id)
        if note is None or note.completed:
            return False
        self._notes.toggle_complete(note_id)
        self._cancel_reminder(note_id)
        return True

    def toggle_complete(self, note_id: str) -> Note | None:
        """Flip a note's completed flag; completing it cancels its reminder."""
        note = self._notes.toggle_complete(note_id)
        if note is not None and note.completed:
            self._cancel_reminder(note_id)
        return note

    def delete_note(self, note_id: str) -> bool:
        """Delete a note and cancel its reminder."""
        deleted = self._notes.delete_note(note_id)
        if deleted:
            self._cancel_reminder(note_id)
        return deleted

    def archive_note(self, note_id: str) -> bool:
        """Archive a note if it is not already, and cancel its reminder."""
        note = self._notes.get_note(note_id)
        if note is None or note.is_archived:
            return False
        self._notes.archive_note(note_id)
        self._cancel_reminder(note_id)
        return True

    def unarchive_note(self, note_id: str) -> Note | None:
        """Unarchive a note. Its reminder is only rescheduled when configured."""
        note = self._notes.unarchive_note(note_id)
        if note is not None and self._reschedule_on_unarchive and self._scheduler:
            if not note.completed:
                self._scheduler.schedule(note)
        return note

    def delete_section(self, section_id: str) -> list[str]:
        """Delete a section after removing its name from every note's tags.

        Tags are swept before the section record is removed.

        Returns:
            Ids of the notes whose tags changed.
        """
        section = self._sections.get_section(section_id)
        if section is None:
            return []
        changed = self._notes.strip_tag(section.name)
        self._sections.delete_section(section_id)
        return changed

    def _cancel_reminder(self, note_id: str) -> None:
        if self._scheduler is not None:
            self._scheduler.cancel(note_id)


__all__ = ["CommandDispatcher", "DispatchOutcome"]
