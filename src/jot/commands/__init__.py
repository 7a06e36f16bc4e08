"""Commands module for Jot.

Interprets spoken queries about notes and applies the requested actions.
"""

from .dispatch import CommandDispatcher, DispatchOutcome
from .interpreter import (
    FALLBACK_RESPONSE,
    CommandAction,
    CommandInterpreter,
    CommandResult,
)

__all__ = [
    "FALLBACK_RESPONSE",
    "CommandAction",
    "CommandDispatcher",
    "CommandInterpreter",
    "CommandResult",
    "DispatchOutcome",
]
