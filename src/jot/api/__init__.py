"""Client for the Jot HTTP service."""

from .client import API_TIMEOUT, APIError, NotesAPIClient

__all__ = ["API_TIMEOUT", "APIError", "NotesAPIClient"]
