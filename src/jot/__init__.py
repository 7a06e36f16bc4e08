"""Jot - voice-first note capture and voice commands.

Jot turns short voice recordings into structured notes:
- Capture: speech is transcribed and split into categorized notes
- Commands: spoken queries are answered and can complete, delete or
  archive notes, or create smart sections
- Reminders: notes with due dates get one local reminder each

Usage:
    python -m jot --capture memo.m4a
    python -m jot --ask question.m4a
    python -m jot --serve --profile dev
"""

__version__ = "0.1.0"

from .config import JotConfig
from .config.loader import load_config
from .engine import JotEngine

__all__ = [
    "JotConfig",
    "JotEngine",
    "__version__",
    "load_config",
]
