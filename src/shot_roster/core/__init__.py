"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        RosterEngineError: Base exception for all engine errors.
        NotFoundError: Missing (or cross-party) fight, party or slot.
        InvalidTemplateKeyError: Unknown party template.
        InvalidArgumentError: Malformed kind, id list or slot fields.
        PersistenceError: Database failure inside a transaction.
        ConfigurationError: Invalid settings.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Route log events to a stream or file.
        setup_logging: Configure logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from shot_roster.core.config import (
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from shot_roster.core.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    InvalidTemplateKeyError,
    NotFoundError,
    PersistenceError,
    RosterEngineError,
)
from shot_roster.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    setup_logging,
)


__all__ = [
    # Exceptions
    "RosterEngineError",
    "NotFoundError",
    "InvalidTemplateKeyError",
    "InvalidArgumentError",
    "PersistenceError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
