"""
Configuration Management for homekeep

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here: where the database lives, where
photos are written, how reminders are planned and how logs are rendered.
Each group has its own environment prefix so it can be overridden on its own.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATA_DIR = Path.home() / ".homekeep"


class DatabaseSettings(BaseSettings):
    """Embedded SQLite store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HOMEKEEP_DB_",
        extra="ignore"
    )

    path: str = Field(
        default=str(DEFAULT_DATA_DIR / "homekeep.sqlite"),
        description="Path to the SQLite database file (':memory:' for a transient store)"
    )
    seed_default_rooms: bool = Field(
        default=True,
        description="Seed the default rooms when the database has none"
    )

    @property
    def is_memory(self) -> bool:
        return self.path == ":memory:"


class PhotoSettings(BaseSettings):
    """Item photo storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HOMEKEEP_PHOTOS_",
        extra="ignore"
    )

    base_dir: str = Field(
        default=str(DEFAULT_DATA_DIR),
        description="Directory that relative photo paths are resolved against"
    )
    subdirectory: str = Field(
        default="Photos",
        description="Folder under base_dir that holds the JPEG files"
    )
    max_bytes: int = Field(
        default=1_000_000,
        ge=10_000,
        description="Encoded size above which a photo is re-compressed"
    )
    quality: int = Field(
        default=70,
        ge=1,
        le=95,
        description="JPEG quality for the first encoding"
    )
    fallback_quality: int = Field(
        default=40,
        ge=1,
        le=95,
        description="JPEG quality used when the first encoding is too large"
    )

    @field_validator('subdirectory')
    @classmethod
    def validate_subdirectory(cls, v: str) -> str:
        """Relative photo paths must stay inside base_dir."""
        v = v.strip().strip("/")
        if not v or ".." in Path(v).parts:
            raise ValueError("subdirectory must be a plain relative folder name")
        return v


class NotificationSettings(BaseSettings):
    """Cleaning reminder planning configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HOMEKEEP_NOTIFY_",
        extra="ignore"
    )

    max_notifications: int = Field(
        default=60,
        ge=1,
        le=64,
        description="Upper bound on pending reminders"
    )
    horizon_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="How many days ahead (starting today) reminders are planned"
    )
    reminder_hour: int = Field(
        default=9,
        ge=0,
        le=23,
        description="Local hour at which a day's reminder fires"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOMEKEEP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level with console rendering, overriding the log settings"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (console rendering otherwise)"
    )

    # Progress
    daily_counts_window: int = Field(
        default=30,
        ge=1,
        le=366,
        description="Days of completion history shown on the progress screen"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are built on access so a broken group does not
    # block the others from loading.

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def photos(self) -> PhotoSettings:
        return PhotoSettings()

    @property
    def notifications(self) -> NotificationSettings:
        return NotificationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings groups.

    Returns a dict of {group_name: is_valid}, plus a `<group>_error`
    entry for each group that failed. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("database", "photos", "notifications", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
