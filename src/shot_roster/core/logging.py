"""Structured logging for the shot-roster engine.

Engine modules log key/value events through structlog loggers obtained with
``get_logger``. The embedding application calls ``setup_logging`` once at
startup to route those events according to its settings: console lines
while developing, JSON lines in production.

Example:
    >>> from shot_roster.core.logging import get_logger, setup_logging
    >>> setup_logging()
    >>> logger = get_logger(__name__)
    >>> logger.info("Roster reconciled", fight_id="...", created=2, deleted=1)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

import structlog

from shot_roster.core.config import Settings, get_settings
from shot_roster.core.exceptions import ConfigurationError


if TYPE_CHECKING:
    from structlog.types import EventDict, Processor, WrappedLogger


APP_NAME = "shot_roster"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp every event with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _resolve_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(
            f"Unknown log level: {level}",
            config_key="log_level",
        )
    return numeric_level


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | Path | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Route structlog events to a stream or file.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render one JSON object per line instead of console text.
        log_file: Append events to this file instead of a stream.
        stream: Stream to write to; defaults to stderr.

    Raises:
        ConfigurationError: If the level name is unknown.
    """
    numeric_level = _resolve_level(level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    if log_file is not None:
        target: IO[str] = Path(log_file).open("a", encoding="utf-8")
    else:
        target = stream or sys.stderr

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=False,
    )


def setup_logging(settings: Settings | None = None, *, stream: IO[str] | None = None) -> None:
    """Configure logging from application settings.

    Debug mode lowers the level to DEBUG whatever ``log_level`` says. The
    application version is bound to every subsequent event.

    Args:
        settings: Settings to apply; defaults to the cached settings.
        stream: Stream to write to when no log file is configured.
    """
    settings = settings or get_settings()
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
        stream=stream,
    )
    clear_context()
    bind_context(app_version=settings.app_version)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a logger; typically called with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key/values to every event logged from this context.

    Request handlers use this for e.g. a campaign or request id before
    calling into the engine.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all values bound with ``bind_context``."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "add_app_context",
    "configure_logging",
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
