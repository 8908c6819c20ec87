"""SQLite persistence layer for the shot-roster engine.

Provides storage for:
- Fights and parties (looked up by the engine, created by collaborators)
- Shots: a fight's roster entries, duplicates allowed
- Party slots: a party's ordered role slots

Every write goes through ``Database.transaction()``, which opens a fresh
connection and starts the transaction with ``BEGIN IMMEDIATE``. SQLite grants
that lock to one writer at a time, so two reconciliations of the same fight
cannot interleave their read-then-write steps.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from shot_roster.core.config import StorageSettings, get_settings
from shot_roster.core.constants import SQLITE_LOCK_MESSAGES
from shot_roster.core.exceptions import PersistenceError
from shot_roster.core.logging import get_logger

logger = get_logger(__name__)


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS fights (
    id           TEXT PRIMARY KEY,
    campaign_id  TEXT NOT NULL,
    name         TEXT NOT NULL,
    created_at   TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS parties (
    id           TEXT PRIMARY KEY,
    campaign_id  TEXT NOT NULL,
    name         TEXT NOT NULL,
    created_at   TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS shots (
    id               TEXT PRIMARY KEY,
    fight_id         TEXT NOT NULL REFERENCES fights(id) ON DELETE CASCADE,
    character_id     TEXT,
    vehicle_id       TEXT,
    initiative       INTEGER,
    driver_shot_id   TEXT,
    driving_shot_id  TEXT,
    created_at       TEXT NOT NULL,
    CHECK (character_id IS NULL OR vehicle_id IS NULL)
);

CREATE INDEX IF NOT EXISTS idx_shots_fight_character ON shots(fight_id, character_id);
CREATE INDEX IF NOT EXISTS idx_shots_fight_vehicle ON shots(fight_id, vehicle_id);

CREATE TABLE IF NOT EXISTS party_slots (
    id                  TEXT PRIMARY KEY,
    party_id            TEXT NOT NULL REFERENCES parties(id) ON DELETE CASCADE,
    role                TEXT NOT NULL,
    position            INTEGER NOT NULL,
    character_id        TEXT,
    vehicle_id          TEXT,
    default_mook_count  INTEGER,
    created_at          TEXT NOT NULL,
    CHECK (character_id IS NULL OR vehicle_id IS NULL),
    CHECK (default_mook_count IS NULL OR default_mook_count >= 0)
);

CREATE INDEX IF NOT EXISTS idx_party_slots_position ON party_slots(party_id, position);
"""


def utc_timestamp(moment: datetime | None = None) -> str:
    """Render a timestamp the way the tables store it.

    Naive datetimes are taken to be UTC. Every stored timestamp carries the
    same offset, so ordering by the text column is chronological.

    Args:
        moment: Time to render; defaults to now (UTC).

    Returns:
        ISO-8601 string with microsecond precision.
    """
    if moment is None:
        moment = datetime.now(UTC)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    else:
        moment = moment.astimezone(UTC)
    return moment.isoformat(timespec="microseconds")


def _is_lock_error(exc: BaseException) -> bool:
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return any(fragment in message for fragment in SQLITE_LOCK_MESSAGES)


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite database holding fights, parties, shots and party slots.

    Connections are opened per call, so one Database may be shared across
    request threads.
    """

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        settings: StorageSettings | None = None,
    ) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured path.
            settings: Storage settings; defaults to the application settings.
        """
        self.settings = settings or get_settings().storage
        self.db_path = Path(db_path) if db_path is not None else self.settings.database_path

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    def _connect(self) -> sqlite3.Connection:
        """Open a connection in manual transaction mode."""
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.settings.busy_timeout_seconds,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _init_schema(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        conn = self._connect()
        try:
            conn.executescript(_SCHEMA_SQL)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )
        finally:
            conn.close()

    def _log_lock_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        logger.warning(
            "Database locked, retrying",
            path=str(self.db_path),
            attempt=retry_state.attempt_number,
            error=str(outcome.exception()) if outcome else None,
        )

    def _begin_immediate(self, conn: sqlite3.Connection) -> None:
        """Take the write lock, backing off while another writer holds it."""
        retrying = Retrying(
            stop=stop_after_attempt(self.settings.lock_retry_attempts),
            wait=wait_exponential(
                multiplier=self.settings.lock_retry_min_wait_seconds,
                min=self.settings.lock_retry_min_wait_seconds,
                max=self.settings.lock_retry_max_wait_seconds,
            ),
            retry=retry_if_exception(_is_lock_error),
            before_sleep=self._log_lock_retry,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                conn.execute("BEGIN IMMEDIATE")

    @contextmanager
    def transaction(self, operation: str = "transaction") -> Generator[sqlite3.Connection, None, None]:
        """Run a block inside one write transaction.

        Commits on success. Any exception rolls the whole transaction back;
        sqlite3 errors are re-raised as PersistenceError, engine errors
        propagate unchanged.

        Args:
            operation: Name used in logs and error context.

        Yields:
            Connection holding the write lock.

        Raises:
            PersistenceError: If SQLite fails to lock, execute or commit.
        """
        conn = self._connect()
        try:
            try:
                self._begin_immediate(conn)
            except sqlite3.Error as exc:
                raise PersistenceError(
                    f"Could not begin {operation}: {exc}",
                    operation=operation,
                ) from exc

            try:
                yield conn
                conn.commit()
            except sqlite3.Error as exc:
                conn.rollback()
                raise PersistenceError(
                    f"{operation} failed: {exc}",
                    operation=operation,
                ) from exc
            except BaseException:
                conn.rollback()
                raise
        finally:
            conn.close()

    @contextmanager
    def connection(self, operation: str = "read") -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection for read-only queries.

        Args:
            operation: Name used in error context.

        Yields:
            Autocommit connection, closed on exit.

        Raises:
            PersistenceError: If a query fails.
        """
        conn = self._connect()
        try:
            yield conn
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"{operation} failed: {exc}",
                operation=operation,
            ) from exc
        finally:
            conn.close()


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance.

    Returns:
        Database singleton instance.
    """
    global _database_instance

    if _database_instance is None:
        _database_instance = Database()

    return _database_instance


__all__ = [
    "Database",
    "get_database",
    "utc_timestamp",
]
