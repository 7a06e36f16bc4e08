"""Persisted user settings.

Holds theme mode, reminder hours, reminder lead time and the user's
timezone. Settings live in the blob store under a single key; missing
keys take defaults and unknown keys are ignored.
"""

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..timefmt import DEFAULT_TIMEZONE

if TYPE_CHECKING:
    from ..storage.blob import BlobStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"


class ThemeMode(Enum):
    """Display theme preference."""

    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


# Field name -> wire name
_WIRE_NAMES = {
    "theme_mode": "themeMode",
    "today_reminder_hour": "todayReminderHour",
    "tomorrow_reminder_hour": "tomorrowReminderHour",
    "shopping_reminder_hour": "shoppingReminderHour",
    "reminder_lead_minutes": "reminderLeadMinutes",
    "timezone": "timezone",
}


@dataclass(frozen=True)
class Settings:
    """User settings with defaults."""

    theme_mode: ThemeMode = ThemeMode.SYSTEM
    today_reminder_hour: int = 18
    tomorrow_reminder_hour: int = 9
    shopping_reminder_hour: int = 10
    reminder_lead_minutes: int = 15
    timezone: str = DEFAULT_TIMEZONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted representation."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[_WIRE_NAMES[f.name]] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Create from a persisted record, defaulting missing or invalid values."""
        defaults = cls()
        values: dict[str, Any] = {}
        for f in fields(cls):
            wire = _WIRE_NAMES[f.name]
            if wire not in data:
                continue
            values[f.name] = data[wire]
        return defaults.merged(values)

    def merged(self, updates: dict[str, Any]) -> "Settings":
        """Return a copy with the valid entries of updates applied.

        Invalid values are logged and skipped.
        """
        clean: dict[str, Any] = {}
        for name, value in updates.items():
            if name == "theme_mode":
                try:
                    clean[name] = ThemeMode(value.value if isinstance(value, ThemeMode) else value)
                except ValueError:
                    logger.warning(f"Ignoring invalid theme mode: {value!r}")
            elif name.endswith("_hour"):
                if isinstance(value, int) and 0 <= value <= 23:
                    clean[name] = value
                else:
                    logger.warning(f"Ignoring invalid {name}: {value!r}")
            elif name == "reminder_lead_minutes":
                if isinstance(value, int) and value >= 0:
                    clean[name] = value
                else:
                    logger.warning(f"Ignoring invalid reminder lead minutes: {value!r}")
            elif name == "timezone":
                if isinstance(value, str) and value.strip():
                    clean[name] = value.strip()
            else:
                raise ValueError(f"Unknown setting: {name}")
        return replace(self, **clean)


class SettingsStore:
    """Loads settings once and persists every update."""

    def __init__(self, blob_store: "BlobStore") -> None:
        """Initialize and load settings from the blob store.

        Args:
            blob_store: Backing key-value store.
        """
        self._blob_store = blob_store
        self._settings = self._load()

    @property
    def settings(self) -> Settings:
        """Get the current settings."""
        return self._settings

    def update(self, **updates: Any) -> Settings:
        """Merge updates into the settings and persist them.

        Raises:
            ValueError: If an unknown setting name is given.
            PersistenceError: If the settings could not be saved.
        """
        updated = self._settings.merged(updates)
        self._blob_store.set(SETTINGS_KEY, updated.to_dict())
        self._settings = updated
        return updated

    def _load(self) -> Settings:
        data = self._blob_store.get(SETTINGS_KEY)
        if not isinstance(data, dict):
            return Settings()
        return Settings.from_dict(data)


__all__ = ["SETTINGS_KEY", "Settings", "SettingsStore", "ThemeMode"]
