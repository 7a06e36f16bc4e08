"""Note extraction from voice transcripts.

Asks the language-understanding service to split a transcript into one
or more structured note drafts, then validates and coerces the reply.
"""

import logging
import re
from collections.abc import Sequence
from datetime import datetime

from ..llm.model import LanguageModel
from ..llm.parsing import extract_json_object, normalize_strings
from ..timefmt import format_current_time, local_now, parse_timestamp
from .models import MAX_TITLE_LENGTH, Category, CustomSection, NoteDraft

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are a voice notes assistant. Read the transcribed speech and extract one or more distinct notes.

Current time: {current_time}
User timezone: {timezone}

Split the speech into SEPARATE notes when it mentions unrelated items, tasks, or ideas. Items that belong to one list stay together. For example:
- "Remind me to call mom tomorrow, also buy milk" = 2 notes (a call reminder and a shopping note)
- "I have an idea for an app, and don't forget the meeting at 3pm" = 2 notes (an idea and a meeting)
- "Pick up groceries: milk, eggs, bread" = 1 note (one shopping list)

For EACH note, provide:
1. title: a short summary (at most 50 characters) of the core subject or action.
   Never put times in the title: "Meeting at 3pm" must be "Meeting".
2. category: "today" (due today), "tomorrow" (due tomorrow), "idea" (creative thought or project), "shopping" (items to buy) or "other"
3. dueDate: the due date and time in ISO 8601 UTC if one is mentioned, otherwise null
4. entities: names of people, places and things mentioned
5. tags: which custom sections the note belongs to
6. rawText: the complete part of the transcript that this note came from.
   Keep the user's wording and details. Only remove speech artifacts (um, uh, repeated words) and fix obvious grammar slips.
{sections}
Time references (relative to the current time above):
- "today", "this afternoon", "tonight" = today's date
- "tomorrow", "next day" = tomorrow's date
- "EOD", "end of day" = today at 17:00 in the user's timezone
- Include the specific time when one is mentioned

Categories:
- Reminders, tasks, calls and meetings = "today" or "tomorrow" depending on the day
- "buy", "get", "pick up" items = "shopping"
- Ideas, thoughts, concepts = "idea"
- Anything else = "other"

Tags:
- Match notes to custom sections by their keywords or by meaning
- A note may have several tags
- Only use names from the custom sections list; return an empty array if none match

Respond with ONLY a JSON object in exactly this format:
{{"notes": [{{"rawText": "...", "title": "...", "category": "today|tomorrow|idea|shopping|other", "dueDate": "2026-01-13T15:00:00Z", "entities": ["..."], "tags": ["..."]}}]}}"""

NO_SECTIONS_TEXT = "\nThere are no custom sections, so every tags array must be empty.\n"

# Clock times such as "3pm", "3:30 p.m.", "15:00", optionally led by "at"/"by"/"@"
_CLOCK_TIME = re.compile(
    r"(?:\b(?:at|by|around)\s+|@\s*)?"
    r"(?:\b\d{1,2}(?:[:.]\d{2})?\s*(?:a\.?m\b\.?|p\.?m\b\.?)|\b\d{1,2}:\d{2}\b)",
    re.IGNORECASE,
)
_DANGLING = re.compile(r"(?:\s+(?:at|by|around|on|@)|[\s,;:\-–]+)$", re.IGNORECASE)


def contains_clock_time(text: str) -> bool:
    """Return True if text contains a clock-time fragment like "3pm" or "15:00"."""
    return bool(_CLOCK_TIME.search(text))


def strip_clock_times(text: str) -> str:
    """Remove clock-time fragments and tidy the leftover punctuation."""
    cleaned = _CLOCK_TIME.sub(" ", text)
    cleaned = re.sub(r"\s{2,}", " ", cleaned).strip()
    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = _DANGLING.sub("", cleaned).strip()
    return cleaned


def make_title(text: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Build a title from text: no clock times, at most max_length characters."""
    title = strip_clock_times(text) or text.strip()
    return title[:max_length].rstrip()


def format_sections_context(sections: Sequence[CustomSection]) -> str:
    """Describe the custom sections for the extraction prompt."""
    if not sections:
        return NO_SECTIONS_TEXT

    lines = [f'- "{s.name}": keywords = [{", ".join(s.keywords)}]' for s in sections]
    return "\nCustom sections (auto-tag if content matches):\n" + "\n".join(lines) + "\n"


class NoteExtractor:
    """Turns a transcript into note drafts.

    The reply from the service is treated as untrusted: every field is
    validated and anything unusable falls back to a single draft holding
    the whole transcript.
    """

    def __init__(self, llm: LanguageModel, default_timezone: str | None = None) -> None:
        """Initialize extractor with language model.

        Args:
            llm: Language model used for segmentation and classification
            default_timezone: Timezone used when a call does not pass one
        """
        self._llm = llm
        self._default_timezone = default_timezone

    def extract(
        self,
        transcript: str,
        sections: Sequence[CustomSection],
        now: datetime | None = None,
        timezone: str | None = None,
    ) -> list[NoteDraft]:
        """Extract note drafts from a transcript.

        Args:
            transcript: Raw transcript text
            sections: The caller's current custom sections
            now: Caller's current local time (defaults to now in timezone)
            timezone: Caller's IANA timezone

        Returns:
            Zero or more drafts. A blank transcript yields no drafts.

        Raises:
            LLMError: If the service could not be reached at all
        """
        text = transcript.strip()
        if not text:
            return []

        timezone = timezone or self._default_timezone
        now_local = now or local_now(timezone)
        system = EXTRACTION_PROMPT.format(
            current_time=format_current_time(now_local),
            timezone=timezone or str(now_local.tzinfo),
            sections=format_sections_context(sections),
        )

        response = self._llm.generate(text, system=system)
        response_text = response.text if hasattr(response, "text") else str(response)

        drafts = self._parse_response(response_text, text, sections)
        logger.info(
            f"Extracted {len(drafts)} notes: "
            f"{[(d.title, d.category.value) for d in drafts]}"
        )
        return drafts

    def _parse_response(
        self,
        response_text: str,
        transcript: str,
        sections: Sequence[CustomSection],
    ) -> list[NoteDraft]:
        data = extract_json_object(response_text)
        items = data.get("notes") if data is not None else None
        if not isinstance(items, list):
            logger.warning("Extraction reply had no notes list, using whole transcript")
            return [fallback_draft(transcript)]

        if not items:
            return []

        section_names = {s.name.casefold(): s.name for s in sections}
        drafts = [
            self._coerce_draft(item, transcript, section_names)
            for item in items
            if isinstance(item, dict)
        ]
        if not drafts:
            logger.warning("Extraction reply had no usable notes, using whole transcript")
            return [fallback_draft(transcript)]
        return drafts

    @staticmethod
    def _coerce_draft(
        item: dict,
        transcript: str,
        section_names: dict[str, str],
    ) -> NoteDraft:
        raw_text = item.get("rawText")
        raw_text = raw_text.strip() if isinstance(raw_text, str) else ""
        raw_text = raw_text or transcript

        title = item.get("title")
        title = title if isinstance(title, str) and title.strip() else raw_text
        title = make_title(title)
        if not title or contains_clock_time(title):
            title = make_title(raw_text)

        tags: list[str] = []
        for tag in normalize_strings(item.get("tags")):
            name = section_names.get(tag.casefold())
            if name is None:
                logger.debug(f"Dropping unknown section tag {tag!r}")
            elif name not in tags:
                tags.append(name)

        return NoteDraft(
            raw_text=raw_text,
            title=title,
            category=Category.coerce(item.get("category")),
            due_date=parse_timestamp(item.get("dueDate")),
            entities=normalize_strings(item.get("entities")),
            tags=tags,
        )


def fallback_draft(transcript: str) -> NoteDraft:
    """Single draft covering the whole transcript, used when extraction fails."""
    return NoteDraft(
        raw_text=transcript,
        title=make_title(transcript[:MAX_TITLE_LENGTH]) or transcript[:MAX_TITLE_LENGTH],
        category=Category.OTHER,
        due_date=None,
        entities=[],
        tags=[],
    )


__all__ = [
    "EXTRACTION_PROMPT",
    "NoteExtractor",
    "contains_clock_time",
    "fallback_draft",
    "make_title",
    "strip_clock_times",
]
