"""Read-side views over the note collection.

None of these change the stored order; they return new lists.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, time

from .models import Category, Note

_UNDATED_CATEGORIES = (Category.IDEA, Category.OTHER, Category.SHOPPING)


@dataclass
class Timeline:
    """Active notes grouped for the timeline view."""

    overdue: list[Note] = field(default_factory=list)
    upcoming: list[Note] = field(default_factory=list)
    undated: list[Note] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.overdue or self.upcoming or self.undated)


def active_notes(notes: Iterable[Note]) -> list[Note]:
    """Notes that are not archived."""
    return [n for n in notes if not n.is_archived]


def archived_notes(notes: Iterable[Note]) -> list[Note]:
    """Notes that are archived."""
    return [n for n in notes if n.is_archived]


def notes_by_category(notes: Iterable[Note]) -> dict[Category, list[Note]]:
    """Group active notes by category for the main feed, in stored order."""
    groups: dict[Category, list[Note]] = {category: [] for category in Category}
    for note in active_notes(notes):
        groups[note.category].append(note)
    return groups


def notes_in_section(notes: Iterable[Note], section_name: str) -> list[Note]:
    """Active notes tagged with a section name."""
    return [n for n in active_notes(notes) if section_name in n.tags]


def timeline(notes: Iterable[Note], now: datetime) -> Timeline:
    """Split open notes into overdue, upcoming and undated groups.

    Open means neither archived nor completed. Overdue notes are due
    before the start of today (in now's timezone); dated groups are sorted
    by due date, soonest first.

    Args:
        notes: Notes to group
        now: Current local time, aware
    """
    start_of_today = datetime.combine(now.date(), time(), tzinfo=now.tzinfo)
    result = Timeline()
    for note in notes:
        if note.is_archived or note.completed:
            continue
        if note.due_date is None:
            if note.category in _UNDATED_CATEGORIES:
                result.undated.append(note)
        elif note.due_date < start_of_today:
            result.overdue.append(note)
        else:
            result.upcoming.append(note)

    result.overdue.sort(key=lambda n: n.due_date)  # type: ignore[arg-type, return-value]
    result.upcoming.sort(key=lambda n: n.due_date)  # type: ignore[arg-type, return-value]
    return result


def search(notes: Iterable[Note], text: str) -> list[Note]:
    """Case-insensitive search over title, raw text, entities and tags.

    Archived notes are included.
    """
    needle = text.strip().casefold()
    if not needle:
        return []

    def haystack(note: Note) -> Iterable[str]:
        yield note.title
        yield note.raw_text
        yield from note.entities
        yield from note.tags

    return [n for n in notes if any(needle in value.casefold() for value in haystack(n))]


__all__ = [
    "Timeline",
    "active_notes",
    "archived_notes",
    "notes_by_category",
    "notes_in_section",
    "search",
    "timeline",
]
