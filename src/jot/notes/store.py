"""Note and custom-section stores.

Both stores keep the live collection in memory and flush the whole
collection to the blob store on every mutation. A mutation builds the
new collection first, persists it, and only then swaps it in, so callers
observe either the pre- or the post-mutation collection. Operating on an
unknown id is a silent no-op.
"""

import logging
import uuid
from dataclasses import fields, replace
from datetime import datetime
from typing import Any

from ..storage.blob import BlobStore
from ..timefmt import utc_now
from .models import DEFAULT_SECTION_ICON, Category, CustomSection, Note, NoteDraft

logger = logging.getLogger(__name__)

NOTES_KEY = "notes"
SECTIONS_KEY = "custom_sections"

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def _new_id() -> str:
    return str(uuid.uuid4())


def _check_updates(record_type: type, updates: dict[str, Any]) -> None:
    allowed = {f.name for f in fields(record_type)}
    for name in updates:
        if name in _IMMUTABLE_FIELDS:
            raise ValueError(f"Field {name!r} cannot be changed")
        if name not in allowed:
            raise ValueError(f"Unknown field for {record_type.__name__}: {name!r}")


def _load_records(blob_store: BlobStore, key: str, factory: Any) -> list[Any]:
    data = blob_store.get(key)
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning(f"Ignoring malformed {key} record: expected a list")
        return []

    records = []
    for item in data:
        try:
            records.append(factory(item))
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping invalid {key} entry: {e}")
    return records


class NoteStore:
    """Store for notes, ordered most recent first."""

    def __init__(self, blob_store: BlobStore) -> None:
        """Initialize the store and load persisted notes.

        Args:
            blob_store: Backing key-value store. A missing record means no notes.
        """
        self._blob_store = blob_store
        self._notes: list[Note] = []
        self.reload()

    @property
    def notes(self) -> list[Note]:
        """Get all notes, most recently created first."""
        return list(self._notes)

    def reload(self) -> None:
        """Re-read the persisted collection."""
        notes = _load_records(self._blob_store, NOTES_KEY, Note.from_dict)
        notes.sort(key=lambda n: n.created_at, reverse=True)
        self._notes = notes
        logger.debug(f"Loaded {len(notes)} notes")

    def get_note(self, note_id: str) -> Note | None:
        """Get a note by id."""
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def add_note(self, draft: NoteDraft) -> Note:
        """Create a note from a draft and persist it.

        Args:
            draft: Extracted note draft.

        Returns:
            The new note with a fresh id and creation time.

        Raises:
            PersistenceError: If the collection could not be saved.
        """
        note = Note(
            id=_new_id(),
            raw_text=draft.raw_text,
            title=draft.title,
            category=draft.category,
            created_at=utc_now(),
            due_date=draft.due_date,
            entities=list(draft.entities),
            tags=list(draft.tags),
        )
        self._commit([note, *self._notes])
        logger.info(f"Added note {note.id}: {note.title!r} [{note.category.value}]")
        return note

    def toggle_complete(self, note_id: str) -> Note | None:
        """Flip a note's completed flag."""
        return self._map(note_id, lambda n: replace(n, completed=not n.completed))

    def archive_note(self, note_id: str, at: datetime | None = None) -> Note | None:
        """Hide a note from primary views. Already archived notes keep their timestamp."""
        return self._map(note_id, lambda n: n if n.is_archived else replace(n, archived_at=at or utc_now()))

    def unarchive_note(self, note_id: str) -> Note | None:
        """Return an archived note to primary views."""
        return self._map(note_id, lambda n: replace(n, archived_at=None))

    def delete_note(self, note_id: str) -> bool:
        """Permanently remove a note.

        Returns:
            True if a note was removed.
        """
        remaining = [n for n in self._notes if n.id != note_id]
        if len(remaining) == len(self._notes):
            return False
        self._commit(remaining)
        logger.info(f"Deleted note {note_id}")
        return True

    def update_note(self, note_id: str, **updates: Any) -> Note | None:
        """Merge the given fields into a note.

        Only supplied fields change. Category values may be given as strings.

        Raises:
            ValueError: If a field is unknown or immutable (id, created_at).
        """
        _check_updates(Note, updates)
        if "category" in updates:
            updates["category"] = Category.coerce(updates["category"])
        return self._map(note_id, lambda n: replace(n, **updates))

    def strip_tag(self, tag: str) -> list[str]:
        """Remove a tag from every note that carries it.

        Returns:
            Ids of the notes that changed.
        """
        changed: list[str] = []
        updated: list[Note] = []
        for note in self._notes:
            if tag in note.tags:
                changed.append(note.id)
                note = replace(note, tags=[t for t in note.tags if t != tag])
            updated.append(note)

        if changed:
            self._commit(updated)
            logger.info(f"Removed tag {tag!r} from {len(changed)} notes")
        return changed

    def _map(self, note_id: str, transform: Any) -> Note | None:
        result: Note | None = None
        updated: list[Note] = []
        for note in self._notes:
            if note.id == note_id:
                note = transform(note)
                result = note
            updated.append(note)

        if result is None:
            logger.debug(f"No note with id {note_id}")
            return None

        self._commit(updated)
        return result

    def _commit(self, notes: list[Note]) -> None:
        self._blob_store.set(NOTES_KEY, [n.to_dict() for n in notes])
        self._notes = notes


class SectionStore:
    """Store for custom sections, in creation order."""

    def __init__(self, blob_store: BlobStore) -> None:
        """Initialize the store and load persisted sections.

        Args:
            blob_store: Backing key-value store.
        """
        self._blob_store = blob_store
        self._sections: list[CustomSection] = []
        self.reload()

    @property
    def sections(self) -> list[CustomSection]:
        """Get all sections."""
        return list(self._sections)

    @property
    def names(self) -> list[str]:
        """Get all section names."""
        return [s.name for s in self._sections]

    def reload(self) -> None:
        """Re-read the persisted collection."""
        self._sections = _load_records(self._blob_store, SECTIONS_KEY, CustomSection.from_dict)

    def get_section(self, section_id: str) -> CustomSection | None:
        """Get a section by id."""
        for section in self._sections:
            if section.id == section_id:
                return section
        return None

    def find_by_name(self, name: str) -> CustomSection | None:
        """Find a section by name, ignoring case."""
        wanted = name.strip().casefold()
        for section in self._sections:
            if section.name.casefold() == wanted:
                return section
        return None

    def add_section(
        self,
        name: str,
        icon: str = DEFAULT_SECTION_ICON,
        keywords: list[str] | tuple[str, ...] = (),
    ) -> CustomSection:
        """Create and persist a section.

        Raises:
            ValueError: If the name is blank.
            PersistenceError: If the collection could not be saved.
        """
        if not name or not name.strip():
            raise ValueError("Section name must not be empty")

        section = CustomSection(
            id=_new_id(),
            name=name.strip(),
            icon=icon or DEFAULT_SECTION_ICON,
            keywords=[k for k in keywords if k],
            created_at=utc_now(),
        )
        self._commit([*self._sections, section])
        logger.info(f"Added section {section.name!r} with keywords {section.keywords}")
        return section

    def delete_section(self, section_id: str) -> bool:
        """Remove a section. Note tags referring to it are left untouched."""
        remaining = [s for s in self._sections if s.id != section_id]
        if len(remaining) == len(self._sections):
            return False
        self._commit(remaining)
        logger.info(f"Deleted section {section_id}")
        return True

    def update_section(self, section_id: str, **updates: Any) -> CustomSection | None:
        """Merge the given fields into a section.

        Raises:
            ValueError: If a field is unknown or immutable.
        """
        _check_updates(CustomSection, updates)
        result: CustomSection | None = None
        updated: list[CustomSection] = []
        for section in self._sections:
            if section.id == section_id:
                section = replace(section, **updates)
                result = section
            updated.append(section)

        if result is not None:
            self._commit(updated)
        return result

    def _commit(self, sections: list[CustomSection]) -> None:
        self._blob_store.set(SECTIONS_KEY, [s.to_dict() for s in sections])
        self._sections = sections


__all__ = ["NOTES_KEY", "SECTIONS_KEY", "NoteStore", "SectionStore"]
