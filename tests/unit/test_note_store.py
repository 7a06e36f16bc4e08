"""Unit tests for the note and section stores."""

from datetime import UTC, datetime

import pytest

from jot.notes.models import Category, NoteDraft
from jot.notes.store import NOTES_KEY, SECTIONS_KEY, NoteStore, SectionStore
from jot.storage.blob import MemoryBlobStore, PersistenceError


def draft(title: str, category: Category = Category.OTHER, tags: list[str] | None = None) -> NoteDraft:
    return NoteDraft(raw_text=title, title=title, category=category, tags=tags or [])


@pytest.fixture
def blob() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blob: MemoryBlobStore) -> NoteStore:
    return NoteStore(blob)


class TestNoteStore:
    """Tests for NoteStore."""

    def test_empty_store(self, store: NoteStore) -> None:
        """Test a missing record means no notes."""
        assert store.notes == []

    def test_add_note_prepends_and_persists(self, store: NoteStore, blob: MemoryBlobStore) -> None:
        """Test new notes go first and are flushed."""
        first = store.add_note(draft("First"))
        second = store.add_note(draft("Second"))

        assert [n.id for n in store.notes] == [second.id, first.id]
        assert [n["id"] for n in blob.get(NOTES_KEY)] == [second.id, first.id]
        assert first.id != second.id
        assert first.completed is False
        assert first.archived_at is None

    def test_reload_round_trip(self, store: NoteStore, blob: MemoryBlobStore) -> None:
        """Test a fresh store sees the same notes in the same order."""
        store.add_note(draft("One", Category.TODAY))
        store.add_note(draft("Two", Category.SHOPPING, ["Home"]))

        reloaded = NoteStore(blob)

        assert reloaded.notes == store.notes

    def test_toggle_complete_twice_restores(self, store: NoteStore) -> None:
        """Test toggling twice leaves the note as it was."""
        note = store.add_note(draft("Task"))

        store.toggle_complete(note.id)
        assert store.get_note(note.id).completed is True

        store.toggle_complete(note.id)
        assert store.get_note(note.id) == note

    def test_unknown_id_is_noop(self, store: NoteStore, blob: MemoryBlobStore) -> None:
        """Test operations on unknown ids change nothing."""
        store.add_note(draft("Task"))
        before = blob.get(NOTES_KEY)

        assert store.toggle_complete("missing") is None
        assert store.archive_note("missing") is None
        assert store.delete_note("missing") is False
        assert store.update_note("missing", title="x") is None
        assert blob.get(NOTES_KEY) == before

    def test_archive_and_unarchive(self, store: NoteStore) -> None:
        """Test archiving sets and unarchiving clears the timestamp."""
        note = store.add_note(draft("Task"))
        at = datetime(2026, 1, 12, 10, 0, tzinfo=UTC)

        archived = store.archive_note(note.id, at=at)
        assert archived.archived_at == at
        assert archived.completed is False

        assert store.unarchive_note(note.id).archived_at is None

    def test_archive_keeps_existing_timestamp(self, store: NoteStore) -> None:
        """Test archiving an archived note does not move its timestamp."""
        note = store.add_note(draft("Task"))
        first = datetime(2026, 1, 12, 10, 0, tzinfo=UTC)
        store.archive_note(note.id, at=first)

        store.archive_note(note.id, at=datetime(2026, 2, 1, tzinfo=UTC))

        assert store.get_note(note.id).archived_at == first

    def test_delete_note(self, store: NoteStore) -> None:
        """Test deleting removes the note."""
        note = store.add_note(draft("Task"))

        assert store.delete_note(note.id) is True
        assert store.get_note(note.id) is None

    def test_update_note_merges_fields(self, store: NoteStore) -> None:
        """Test only given fields change and categories may be strings."""
        note = store.add_note(draft("Task"))

        updated = store.update_note(note.id, title="Renamed", category="idea")

        assert updated.title == "Renamed"
        assert updated.category is Category.IDEA
        assert updated.raw_text == note.raw_text
        assert updated.created_at == note.created_at

    @pytest.mark.parametrize("field_name", ["id", "created_at"])
    def test_update_note_rejects_immutable_fields(self, store: NoteStore, field_name: str) -> None:
        """Test id and creation time cannot be changed."""
        note = store.add_note(draft("Task"))

        with pytest.raises(ValueError, match=field_name):
            store.update_note(note.id, **{field_name: "x"})

    def test_update_note_rejects_unknown_fields(self, store: NoteStore) -> None:
        """Test unknown fields are rejected."""
        note = store.add_note(draft("Task"))

        with pytest.raises(ValueError, match="Unknown field"):
            store.update_note(note.id, colour="red")

    def test_strip_tag(self, store: NoteStore) -> None:
        """Test a tag is removed from every note carrying it."""
        a = store.add_note(draft("A", tags=["Work", "Home"]))
        b = store.add_note(draft("B", tags=["Work"]))
        c = store.add_note(draft("C", tags=["Home"]))

        changed = store.strip_tag("Work")

        assert sorted(changed) == sorted([a.id, b.id])
        assert store.get_note(a.id).tags == ["Home"]
        assert store.get_note(b.id).tags == []
        assert store.get_note(c.id).tags == ["Home"]

    def test_persistence_failure_keeps_state(self, store: NoteStore, blob: MemoryBlobStore) -> None:
        """Test a failed flush leaves the in-memory collection unchanged."""
        note = store.add_note(draft("Task"))
        blob.set_read_only()

        with pytest.raises(PersistenceError):
            store.toggle_complete(note.id)
        with pytest.raises(PersistenceError):
            store.add_note(draft("Another"))

        assert store.notes == [note]

    def test_malformed_record_loads_empty(self, blob: MemoryBlobStore) -> None:
        """Test a corrupt notes record is ignored."""
        blob.set(NOTES_KEY, {"not": "a list"})
        assert NoteStore(blob).notes == []

    def test_invalid_entries_skipped(self, blob: MemoryBlobStore) -> None:
        """Test entries without ids are skipped on load."""
        blob.set(NOTES_KEY, [{"title": "no id"}, {"id": "n1", "title": "ok"}])
        assert [n.id for n in NoteStore(blob).notes] == ["n1"]


class TestSectionStore:
    """Tests for SectionStore."""

    @pytest.fixture
    def sections(self, blob: MemoryBlobStore) -> SectionStore:
        return SectionStore(blob)

    def test_add_section(self, sections: SectionStore, blob: MemoryBlobStore) -> None:
        """Test sections are appended and persisted."""
        work = sections.add_section("Work", "briefcase", ["meeting", "boss"])
        home = sections.add_section("  Home  ")

        assert sections.names == ["Work", "Home"]
        assert home.icon == "folder"
        assert work.keywords == ["meeting", "boss"]
        assert [s["name"] for s in blob.get(SECTIONS_KEY)] == ["Work", "Home"]

    def test_blank_name_rejected(self, sections: SectionStore) -> None:
        """Test blank names are rejected."""
        with pytest.raises(ValueError):
            sections.add_section("   ")

    def test_find_by_name_ignores_case(self, sections: SectionStore) -> None:
        """Test lookup by name is case-insensitive."""
        work = sections.add_section("Work")
        assert sections.find_by_name("work") == work
        assert sections.find_by_name("play") is None

    def test_delete_section(self, sections: SectionStore) -> None:
        """Test deleting removes the section and unknown ids are a no-op."""
        work = sections.add_section("Work")

        assert sections.delete_section("missing") is False
        assert sections.delete_section(work.id) is True
        assert sections.sections == []

    def test_update_section(self, sections: SectionStore) -> None:
        """Test sections can be edited but ids cannot."""
        work = sections.add_section("Work")

        assert sections.update_section(work.id, icon="briefcase").icon == "briefcase"
        with pytest.raises(ValueError):
            sections.update_section(work.id, id="other")

    def test_reload_round_trip(self, sections: SectionStore, blob: MemoryBlobStore) -> None:
        """Test persisted sections load back unchanged."""
        sections.add_section("Work", "briefcase", ["meeting"])
        assert SectionStore(blob).sections == sections.sections
