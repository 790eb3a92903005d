"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from homekeep.config import (
    AppSettings,
    DatabaseSettings,
    NotificationSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:

    def test_notification_defaults(self):
        settings = NotificationSettings()
        assert settings.max_notifications == 60
        assert settings.horizon_days == 7
        assert settings.reminder_hour == 9

    def test_database_defaults(self):
        settings = DatabaseSettings()
        assert settings.path.endswith("homekeep.sqlite")
        assert settings.seed_default_rooms is True
        assert not settings.is_memory


class TestEnvironment:
    """Tests for environment overrides."""

    def test_database_path_from_env(self, monkeypatch):
        monkeypatch.setenv("HOMEKEEP_DB_PATH", ":memory:")
        assert get_settings().database.is_memory

    def test_notification_env(self, monkeypatch):
        monkeypatch.setenv("HOMEKEEP_NOTIFY_REMINDER_HOUR", "20")
        assert get_settings().notifications.reminder_hour == 20

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("HOMEKEEP_LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("HOMEKEEP_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            AppSettings()

    def test_out_of_range_hour_rejected(self):
        with pytest.raises(ValidationError):
            NotificationSettings(reminder_hour=24)


class TestValidateAllSettings:

    def test_all_valid(self):
        results = validate_all_settings()
        assert results == {"database": True, "photos": True, "notifications": True, "app": True}

    def test_broken_group_reported_alone(self, monkeypatch):
        monkeypatch.setenv("HOMEKEEP_PHOTOS_MAX_BYTES", "10")
        results = validate_all_settings()
        assert results["photos"] is False
        assert "photos_error" in results
        assert results["database"] is True
