"""Configuration management for the shot-roster engine.

Centralized settings built on pydantic-settings, read from environment
variables and an optional ``.env`` file.

Example:
    >>> from shot_roster.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.storage.database_path
    PosixPath('data/shot_roster.db')

Environment Variables:
    SHOT_ROSTER_DEBUG: Enable debug mode
    SHOT_ROSTER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SHOT_ROSTER_LOG_JSON: Emit JSON log lines
    SHOT_ROSTER_LOG_FILE: Append logs to this file
    SHOT_ROSTER_STORAGE_DATABASE_PATH: Path to the SQLite database file
    SHOT_ROSTER_STORAGE_BUSY_TIMEOUT_SECONDS: How long SQLite waits on a locked database
    SHOT_ROSTER_STORAGE_LOCK_RETRY_ATTEMPTS: Attempts to acquire the write lock
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shot_roster.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the SQLite roster database.

    Attributes:
        database_path: Path to the SQLite database file.
        busy_timeout_seconds: Seconds SQLite itself waits for a competing writer.
        lock_retry_attempts: Attempts made to begin a write transaction.
        lock_retry_min_wait_seconds: Initial backoff between lock attempts.
        lock_retry_max_wait_seconds: Upper bound for the backoff.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOT_ROSTER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/shot_roster.db"),
        description="Path to SQLite database",
    )
    busy_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="SQLite busy timeout",
    )
    lock_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts to acquire the write lock",
    )
    lock_retry_min_wait_seconds: float = Field(
        default=0.05,
        ge=0,
        description="Initial backoff between lock attempts",
    )
    lock_retry_max_wait_seconds: float = Field(
        default=2.0,
        gt=0,
        le=60,
        description="Maximum backoff between lock attempts",
    )

    @model_validator(mode="after")
    def validate_retry_window(self) -> "StorageSettings":
        """Ensure the backoff window is not inverted.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the minimum wait exceeds the maximum wait.
        """
        if self.lock_retry_min_wait_seconds > self.lock_retry_max_wait_seconds:
            raise ConfigurationError(
                f"lock_retry_min_wait_seconds ({self.lock_retry_min_wait_seconds}) "
                f"must not exceed lock_retry_max_wait_seconds "
                f"({self.lock_retry_max_wait_seconds})",
                config_key="lock_retry_min_wait_seconds",
            )
        return self


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_version: Version bound to every log event.
        debug: Log at DEBUG regardless of log_level.
        log_level: Application logging level.
        log_json: Render logs as JSON lines.
        log_file: Append logs to this file instead of stderr.
        storage: Database settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOT_ROSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )
    log_file: Path | None = Field(
        default=None,
        description="Log file path",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Mostly useful in tests, or after environment variables changed.
    """
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
