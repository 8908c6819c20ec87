"""Tests for structured logging setup."""

from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING, Any

import pytest
import structlog

from shot_roster.core.config import Settings
from shot_roster.core.exceptions import ConfigurationError
from shot_roster.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    setup_logging,
)
from shot_roster.engine.reconciler import RosterReconciler
from shot_roster.storage.records import FightRecord


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults and drop bound context after each test."""
    yield
    clear_context()
    structlog.reset_defaults()


def _events(buffer: io.StringIO) -> list[dict[str, Any]]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()]


class TestSetupLogging:
    """Tests for settings-driven logging setup."""

    def test_json_events_carry_app_and_version(self) -> None:
        """Test JSON lines include the app name and bound version."""
        buffer = io.StringIO()
        setup_logging(Settings(log_json=True, app_version="9.9.9"), stream=buffer)

        get_logger("tests").info("Roster reconciled", created=2)

        [event] = _events(buffer)
        assert event["event"] == "Roster reconciled"
        assert event["app"] == "shot_roster"
        assert event["app_version"] == "9.9.9"
        assert event["level"] == "info"
        assert event["created"] == 2

    def test_level_filters(self) -> None:
        """Test events below the configured level are dropped."""
        buffer = io.StringIO()
        setup_logging(Settings(log_json=True, log_level="WARNING"), stream=buffer)

        logger = get_logger("tests")
        logger.info("quiet")
        logger.warning("loud")

        assert [e["event"] for e in _events(buffer)] == ["loud"]

    def test_debug_overrides_level(self) -> None:
        """Test debug mode logs DEBUG events whatever log_level says."""
        buffer = io.StringIO()
        setup_logging(Settings(log_json=True, log_level="ERROR", debug=True), stream=buffer)

        get_logger("tests").debug("detail")

        assert [e["event"] for e in _events(buffer)] == ["detail"]

    def test_log_file(self, tmp_path: Path) -> None:
        """Test events are appended to the configured file."""
        log_path = tmp_path / "engine.log"
        setup_logging(Settings(log_json=True, log_file=log_path))

        get_logger("tests").info("to file")

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["event"] == "to file"

    def test_engine_events(self, reconciler: RosterReconciler, fight: FightRecord) -> None:
        """Test engine operations emit structured events."""
        buffer = io.StringIO()
        setup_logging(Settings(log_json=True), stream=buffer)

        reconciler.reconcile(fight.id, "character", ["c1", "c1"])

        [event] = [e for e in _events(buffer) if e["event"] == "Roster reconciled"]
        assert event["fight_id"] == fight.id
        assert event["kind"] == "character"
        assert (event["created"], event["deleted"]) == (2, 0)


class TestContext:
    """Tests for bound logging context."""

    def test_bind_and_clear(self) -> None:
        """Test bound values appear until cleared."""
        buffer = io.StringIO()
        configure_logging(json_format=True, stream=buffer)

        bind_context(campaign_id="camp-1")
        get_logger("tests").info("first")
        clear_context()
        get_logger("tests").info("second")

        first, second = _events(buffer)
        assert first["campaign_id"] == "camp-1"
        assert "campaign_id" not in second

    def test_console_renderer(self) -> None:
        """Test the console format renders the event text."""
        buffer = io.StringIO()
        configure_logging(stream=buffer)

        get_logger("tests").info("plain event", count=3)

        assert "plain event" in buffer.getvalue()
        assert "count=3" in buffer.getvalue()

    def test_unknown_level(self) -> None:
        """Test an unknown level name is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            configure_logging(level="LOUD")

        assert exc_info.value.details["config_key"] == "log_level"
