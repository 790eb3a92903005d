"""Configuration package."""

from homekeep.config.settings import (
    AppSettings,
    DatabaseSettings,
    NotificationSettings,
    PhotoSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "NotificationSettings",
    "PhotoSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
