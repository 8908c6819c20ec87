"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the shot-roster test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shot_roster.core.config import StorageSettings
from shot_roster.engine.composer import PartyComposer
from shot_roster.engine.reconciler import RosterReconciler
from shot_roster.storage.database import Database
from shot_roster.storage.directory import Directory
from shot_roster.storage.records import FightRecord, PartyRecord


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from shot_roster.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "SHOT_ROSTER_DEBUG": "true",
        "SHOT_ROSTER_LOG_LEVEL": "DEBUG",
        "SHOT_ROSTER_STORAGE_LOCK_RETRY_ATTEMPTS": "5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def storage_settings(tmp_path: Path) -> StorageSettings:
    """Storage settings pointing at a temporary database with fast retries.

    Returns:
        StorageSettings instance.
    """
    return StorageSettings(
        database_path=tmp_path / "roster.db",
        busy_timeout_seconds=0.1,
        lock_retry_attempts=2,
        lock_retry_min_wait_seconds=0.01,
        lock_retry_max_wait_seconds=0.02,
    )


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(storage_settings: StorageSettings) -> Database:
    """Create a fresh file-backed database.

    Args:
        storage_settings: Settings for the temporary database.

    Returns:
        Database instance.
    """
    return Database(storage_settings.database_path, settings=storage_settings)


def _create_fight(database: Database, name: str) -> FightRecord:
    with database.transaction("create_fight") as conn:
        return Directory(conn).create_fight("campaign-1", name)


def _create_party(database: Database, name: str) -> PartyRecord:
    with database.transaction("create_party") as conn:
        return Directory(conn).create_party("campaign-1", name)


@pytest.fixture
def fight(database: Database) -> FightRecord:
    """Create a fight to reconcile against."""
    return _create_fight(database, "Warehouse Brawl")


@pytest.fixture
def other_fight(database: Database) -> FightRecord:
    """Create a second, unrelated fight."""
    return _create_fight(database, "Rooftop Chase")


@pytest.fixture
def party(database: Database) -> PartyRecord:
    """Create an empty party."""
    return _create_party(database, "Triad Enforcers")


@pytest.fixture
def other_party(database: Database) -> PartyRecord:
    """Create a second, unrelated party."""
    return _create_party(database, "Dragon Syndicate")


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def reconciler(database: Database) -> RosterReconciler:
    """Create a reconciler on the test database."""
    return RosterReconciler(database)


@pytest.fixture
def composer(database: Database, reconciler: RosterReconciler) -> PartyComposer:
    """Create a party composer sharing the test reconciler."""
    return PartyComposer(database, reconciler)
