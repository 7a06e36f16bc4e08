"""Unit tests for persisted user settings."""

import pytest

from jot.config.settings import SETTINGS_KEY, Settings, SettingsStore, ThemeMode
from jot.storage.blob import MemoryBlobStore, PersistenceError


class TestSettings:
    """Tests for the Settings record."""

    def test_defaults(self) -> None:
        """Test default reminder settings."""
        settings = Settings()
        assert settings.theme_mode is ThemeMode.SYSTEM
        assert settings.today_reminder_hour == 18
        assert settings.tomorrow_reminder_hour == 9
        assert settings.shopping_reminder_hour == 10
        assert settings.reminder_lead_minutes == 15
        assert settings.timezone == "America/New_York"

    def test_from_dict_missing_and_unknown_keys(self) -> None:
        """Test missing keys take defaults and unknown keys are ignored."""
        settings = Settings.from_dict({"themeMode": "dark", "fontSize": 14})

        assert settings.theme_mode is ThemeMode.DARK
        assert settings.today_reminder_hour == 18

    def test_from_dict_invalid_values_default(self) -> None:
        """Test out-of-range values fall back to defaults."""
        settings = Settings.from_dict(
            {"todayReminderHour": 30, "reminderLeadMinutes": -5, "themeMode": "neon"}
        )

        assert settings.today_reminder_hour == 18
        assert settings.reminder_lead_minutes == 15
        assert settings.theme_mode is ThemeMode.SYSTEM

    def test_to_dict_round_trip(self) -> None:
        """Test wire names and round trip."""
        settings = Settings(theme_mode=ThemeMode.LIGHT, today_reminder_hour=17)

        data = settings.to_dict()

        assert data["themeMode"] == "light"
        assert data["todayReminderHour"] == 17
        assert Settings.from_dict(data) == settings

    def test_merged_unknown_setting(self) -> None:
        """Test unknown setting names are rejected."""
        with pytest.raises(ValueError):
            Settings().merged({"volume": 3})


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_loads_defaults_when_missing(self) -> None:
        """Test an empty store yields defaults."""
        assert SettingsStore(MemoryBlobStore()).settings == Settings()

    def test_update_persists(self) -> None:
        """Test updates are saved and visible to a new store."""
        blob = MemoryBlobStore()
        store = SettingsStore(blob)

        store.update(today_reminder_hour=20, timezone="Europe/Berlin")

        assert blob.get(SETTINGS_KEY)["todayReminderHour"] == 20
        assert SettingsStore(blob).settings.timezone == "Europe/Berlin"

    def test_failed_update_keeps_settings(self) -> None:
        """Test a failed write leaves the previous settings in place."""
        blob = MemoryBlobStore()
        store = SettingsStore(blob)
        blob.set_read_only()

        with pytest.raises(PersistenceError):
            store.update(theme_mode="dark")

        assert store.settings.theme_mode is ThemeMode.SYSTEM
