"""Voice command interpretation.

Asks the language-understanding service to answer a spoken question about
the user's notes, pick out the notes it refers to, and classify an optional
bulk action. The interpreter never mutates anything; the dispatcher applies
the result.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..llm.model import LanguageModel
from ..llm.parsing import extract_json_object, normalize_strings
from ..notes.models import DEFAULT_SECTION_ICON, CustomSection, Note
from ..timefmt import format_current_time, format_due_local

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "I couldn't find anything related to that."


class CommandAction(Enum):
    """Bulk actions a voice command can request."""

    COMPLETE = "complete"
    DELETE = "delete"
    ARCHIVE = "archive"
    CREATE_SECTION = "create_section"

    @classmethod
    def parse(cls, value: Any) -> "CommandAction | None":
        """Convert a raw value to an action, or None if it is not one."""
        if isinstance(value, CommandAction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


@dataclass
class CommandResult:
    """Outcome of interpreting one spoken query.

    Attributes:
        query: The transcript text
        response: Conversational reply
        matched_notes: Caller's notes the reply refers to
        action: Requested bulk action, if any
        section_name: Name for a new section (create_section only)
        section_icon: Icon for a new section (create_section only)
        section_keywords: Auto-tag keywords for a new section (create_section only)
    """

    query: str
    response: str = FALLBACK_RESPONSE
    matched_notes: list[Note] = field(default_factory=list)
    action: CommandAction | None = None
    section_name: str | None = None
    section_icon: str | None = None
    section_keywords: list[str] = field(default_factory=list)

    @property
    def matched_note_ids(self) -> list[str]:
        """Get the ids of the matched notes."""
        return [n.id for n in self.matched_notes]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "query": self.query,
            "response": self.response,
            "matchedNotes": [n.to_dict() for n in self.matched_notes],
            "action": self.action.value if self.action else None,
            "sectionName": self.section_name,
            "sectionIcon": self.section_icon,
            "sectionKeywords": list(self.section_keywords),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommandResult":
        """Create from the wire representation, skipping malformed notes."""
        notes = []
        for item in data.get("matchedNotes") or []:
            try:
                notes.append(Note.from_dict(item))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed matched note: {e}")

        return cls(
            query=str(data.get("query") or ""),
            response=str(data.get("response") or FALLBACK_RESPONSE),
            matched_notes=notes,
            action=CommandAction.parse(data.get("action")),
            section_name=data.get("sectionName") or None,
            section_icon=data.get("sectionIcon") or None,
            section_keywords=normalize_strings(data.get("sectionKeywords")),
        )


QUERY_PROMPT = """You are a helpful voice notes assistant.

Current time: {current_time}
User timezone: {timezone}

The user has these notes:

{notes}

{sections}

IMPORTANT: When you mention a time, use exactly the time shown in that note's "Due:" field. Those times are already in the user's timezone; never convert or adjust them.

You can:
1. Answer questions about the notes conversationally
2. Complete notes when asked (e.g., "mark the grocery list as done")
3. Delete notes when asked (e.g., "delete my shopping list")
4. Archive notes when asked (e.g., "archive my completed work tasks")
5. Create a new section when asked (e.g., "create a work section for meetings, deadlines, boss")

Pick at most one action:
- complete: mark notes as done
- delete: remove notes
- archive: hide notes from the main view but keep them
- create_section: create a new smart section
- null: just answer the question

For create_section, also give:
- sectionName: name of the section (e.g., "Work", "Family")
- sectionIcon: Feather icon name (e.g., "briefcase", "users", "heart", "book")
- sectionKeywords: keywords that should auto-tag notes into the section

Respond with ONLY a JSON object:
{{"response": "Conversational answer", "matchedNoteIds": ["id1", "id2"], "action": "complete" | "delete" | "archive" | "create_section" | null, "sectionName": "Work", "sectionIcon": "briefcase", "sectionKeywords": ["meeting", "deadline", "boss"]}}

Examples:
- "Create a work section" -> action "create_section", sectionName "Work", sectionIcon "briefcase", sectionKeywords ["meeting", "deadline", "work", "office"]
- "Archive my done tasks" -> action "archive", matchedNoteIds of the completed notes
- "Mark grocery list done" -> action "complete", matchedNoteIds of the grocery list note"""


def format_note_line(note: Note, timezone: str) -> str:
    """Describe one note for the query prompt, with its due date in local time."""
    line = f"- [ID:{note.id}] [{note.category.value}] {note.title}"
    if note.completed:
        line += " (DONE)"
    if note.is_archived:
        line += " (ARCHIVED)"
    if note.tags:
        line += f" [Tags: {', '.join(note.tags)}]"
    if note.due_date is not None:
        line += f" (Due: {format_due_local(note.due_date, timezone)})"
    return line


class CommandInterpreter:
    """Classifies spoken commands against the user's notes."""

    def __init__(self, llm: LanguageModel) -> None:
        """Initialize interpreter with language model.

        Args:
            llm: Language model used for understanding
        """
        self._llm = llm

    def interpret(
        self,
        transcript: str,
        notes: Sequence[Note],
        sections: Sequence[CustomSection],
        now_local: datetime,
        timezone: str,
    ) -> CommandResult:
        """Interpret a spoken query.

        Args:
            transcript: Transcribed query
            notes: The caller's full note collection
            sections: The caller's custom sections
            now_local: Caller's current local time
            timezone: Caller's IANA timezone, used to render due dates

        Returns:
            CommandResult; malformed replies yield the fallback response
            with no matches and no action

        Raises:
            LLMError: If the service could not be reached at all
        """
        query = transcript.strip()
        if not query:
            return CommandResult(query=transcript)

        notes_context = "\n".join(format_note_line(n, timezone) for n in notes)
        if sections:
            sections_context = "Existing custom sections: " + ", ".join(s.name for s in sections)
        else:
            sections_context = "No custom sections yet."

        system = QUERY_PROMPT.format(
            current_time=format_current_time(now_local),
            timezone=timezone,
            notes=notes_context or "No notes yet.",
            sections=sections_context,
        )

        response = self._llm.generate(query, system=system)
        response_text = response.text if hasattr(response, "text") else str(response)

        result = self._parse_response(response_text, query, notes)
        logger.info(
            f"Interpreted query: action={result.action.value if result.action else None}, "
            f"matched={len(result.matched_notes)}"
        )
        return result

    @staticmethod
    def _parse_response(response_text: str, query: str, notes: Sequence[Note]) -> CommandResult:
        data = extract_json_object(response_text)
        if data is None:
            logger.warning("Query reply was not a JSON object, using fallback response")
            return CommandResult(query=query)

        reply = data.get("response")
        reply = reply.strip() if isinstance(reply, str) else ""

        wanted = set(normalize_strings(data.get("matchedNoteIds")))
        matched = []
        seen: set[str] = set()
        for note in notes:
            if note.id in wanted and note.id not in seen:
                matched.append(note)
                seen.add(note.id)

        action = CommandAction.parse(data.get("action"))
        section_name = section_icon = None
        section_keywords: list[str] = []
        if action is CommandAction.CREATE_SECTION:
            name = data.get("sectionName")
            if isinstance(name, str) and name.strip():
                section_name = name.strip()
                icon = data.get("sectionIcon")
                section_icon = icon.strip() if isinstance(icon, str) and icon.strip() else DEFAULT_SECTION_ICON
                section_keywords = normalize_strings(data.get("sectionKeywords"))
            else:
                logger.warning("create_section reply had no section name, ignoring action")
                action = None

        return CommandResult(
            query=query,
            response=reply or FALLBACK_RESPONSE,
            matched_notes=matched,
            action=action,
            section_name=section_name,
            section_icon=section_icon,
            section_keywords=section_keywords,
        )


__all__ = [
    "FALLBACK_RESPONSE",
    "QUERY_PROMPT",
    "CommandAction",
    "CommandInterpreter",
    "CommandResult",
    "format_note_line",
]
