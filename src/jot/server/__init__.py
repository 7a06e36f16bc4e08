"""HTTP service for voice capture and voice commands."""

from .app import create_app

__all__ = ["create_app"]
