"""Data models for voice notes.

Defines the Note and CustomSection records, the NoteDraft produced by the
extractor, and the Category enum that drives section placement and
default reminder schedules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..timefmt import format_timestamp, parse_timestamp, utc_now

MAX_TITLE_LENGTH = 50
DEFAULT_SECTION_ICON = "folder"


class Category(Enum):
    """Fixed note categories."""

    TODAY = "today"
    TOMORROW = "tomorrow"
    IDEA = "idea"
    SHOPPING = "shopping"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: Any) -> "Category":
        """Convert a raw value to a Category, defaulting to OTHER."""
        if isinstance(value, Category):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.OTHER


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


@dataclass
class NoteDraft:
    """A structured note produced from a transcript, before it has an id.

    Attributes:
        raw_text: Cleaned transcript portion this note was derived from
        title: Short summary without time-of-day text
        category: Assigned category
        due_date: Optional absolute due time (aware, UTC)
        entities: Extracted names of people, places, things
        tags: Custom section names this note belongs to
    """

    raw_text: str
    title: str
    category: Category = Category.OTHER
    due_date: datetime | None = None
    entities: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "rawText": self.raw_text,
            "title": self.title,
            "category": self.category.value,
            "dueDate": format_timestamp(self.due_date),
            "entities": list(self.entities),
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NoteDraft":
        """Create from the wire representation."""
        return cls(
            raw_text=str(data.get("rawText") or ""),
            title=str(data.get("title") or ""),
            category=Category.coerce(data.get("category")),
            due_date=parse_timestamp(data.get("dueDate")),
            entities=_string_list(data.get("entities")),
            tags=_string_list(data.get("tags")),
        )


@dataclass
class Note:
    """A stored note.

    `completed` and `archived_at` are independent: a note can be completed
    without being archived and vice versa.
    """

    id: str
    raw_text: str
    title: str
    category: Category
    created_at: datetime = field(default_factory=utc_now)
    due_date: datetime | None = None
    entities: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    completed: bool = False
    archived_at: datetime | None = None

    @property
    def is_archived(self) -> bool:
        """Return True if the note is hidden from primary views."""
        return self.archived_at is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted/wire representation."""
        return {
            "id": self.id,
            "rawText": self.raw_text,
            "title": self.title,
            "category": self.category.value,
            "dueDate": format_timestamp(self.due_date),
            "entities": list(self.entities),
            "tags": list(self.tags),
            "completed": self.completed,
            "archivedAt": format_timestamp(self.archived_at),
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        """Create from the persisted/wire representation.

        Raises:
            KeyError: If the record has no id.
        """
        return cls(
            id=str(data["id"]),
            raw_text=str(data.get("rawText") or ""),
            title=str(data.get("title") or ""),
            category=Category.coerce(data.get("category")),
            created_at=parse_timestamp(data.get("createdAt")) or utc_now(),
            due_date=parse_timestamp(data.get("dueDate")),
            entities=_string_list(data.get("entities")),
            tags=_string_list(data.get("tags")),
            completed=bool(data.get("completed", False)),
            archived_at=parse_timestamp(data.get("archivedAt")),
        )


@dataclass
class CustomSection:
    """A user-defined smart folder.

    Attributes:
        id: Unique section identifier
        name: Display name, matched against Note.tags
        icon: Symbolic icon name
        keywords: Hints used by the extractor for auto-tagging
        created_at: When the section was created
    """

    id: str
    name: str
    icon: str = DEFAULT_SECTION_ICON
    keywords: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted representation."""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "keywords": list(self.keywords),
            "createdAt": format_timestamp(self.created_at),
        }

    def to_prompt_dict(self) -> dict[str, Any]:
        """Convert to the `{name, keywords}` shape sent to the service."""
        return {"name": self.name, "keywords": list(self.keywords)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomSection":
        """Create from a persisted or wire record.

        Wire records may carry only `name` and `keywords`.
        """
        return cls(
            id=str(data.get("id") or data.get("name") or ""),
            name=str(data.get("name") or ""),
            icon=str(data.get("icon") or DEFAULT_SECTION_ICON),
            keywords=_string_list(data.get("keywords")),
            created_at=parse_timestamp(data.get("createdAt")) or utc_now(),
        )


__all__ = [
    "Category",
    "CustomSection",
    "DEFAULT_SECTION_ICON",
    "MAX_TITLE_LENGTH",
    "Note",
    "NoteDraft",
]
