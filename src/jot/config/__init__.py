"""Configuration module for Jot.

This module provides configuration loading and persisted user settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .settings import Settings, SettingsStore, ThemeMode


@dataclass
class STTConfig:
    """Speech-to-text configuration."""

    provider: str = "openai"
    model: str = "whisper-1"
    api_url: str = "https://api.openai.com/v1/audio/transcriptions"
    timeout_seconds: float = 60.0


@dataclass
class LLMConfig:
    """Language understanding configuration."""

    provider: str = "claude"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    temperature: float = 0.2
    timeout_seconds: float = 60.0


@dataclass
class StorageConfig:
    """Local persistence configuration."""

    backend: str = "json"
    path: str = "~/.jot/store.json"
    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "jot"


@dataclass
class RemindersConfig:
    """Reminder behavior configuration."""

    reschedule_on_unarchive: bool = False


@dataclass
class ServerConfig:
    """HTTP service configuration."""

    host: str = "127.0.0.1"
    port: int = 5000
    default_timezone: str = "America/New_York"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class JotConfig:
    """Main Jot configuration."""

    stt: STTConfig = field(default_factory=STTConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    reminders: RemindersConfig = field(default_factory=RemindersConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> JotConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> JotConfig:
        """Load configuration by profile name (default, dev, test)."""
        ...


# Public API
__all__ = [
    "ConfigLoader",
    "JotConfig",
    "LLMConfig",
    "LoggingConfig",
    "RemindersConfig",
    "STTConfig",
    "ServerConfig",
    "Settings",
    "SettingsStore",
    "StorageConfig",
    "ThemeMode",
]
