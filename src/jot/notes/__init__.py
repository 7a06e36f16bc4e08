"""Notes module for Jot.

Provides note extraction from transcripts, the note and section stores,
and read-side views.
"""

from .extractor import NoteExtractor, contains_clock_time, fallback_draft
from .models import Category, CustomSection, Note, NoteDraft
from .store import NoteStore, SectionStore

__all__ = [
    "Category",
    "CustomSection",
    "Note",
    "NoteDraft",
    "NoteExtractor",
    "NoteStore",
    "SectionStore",
    "contains_clock_time",
    "fallback_draft",
]
