"""Persistence for fight rosters (shots)."""

from __future__ import annotations

import sqlite3
import uuid
from collections.abc import Sequence
from datetime import datetime

from shot_roster.models.enums import ParticipantKind
from shot_roster.storage.database import utc_timestamp
from shot_roster.storage.records import ShotRecord


_SHOT_COLUMNS = (
    "id, fight_id, character_id, vehicle_id, initiative, "
    "driver_shot_id, driving_shot_id, created_at"
)


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class RosterStore:
    """Reads and writes shots on an open connection.

    Shots come back oldest first: by ``created_at``, then by insertion order
    for shots stamped with the same instant.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def list_for_fight(
        self,
        fight_id: str,
        kind: ParticipantKind | None = None,
    ) -> list[ShotRecord]:
        """Return a fight's shots, oldest first.

        Args:
            fight_id: Fight to read.
            kind: Restrict to shots bound to this kind of participant.
        """
        query = f"SELECT {_SHOT_COLUMNS} FROM shots WHERE fight_id = ?"
        if kind is not None:
            query += f" AND {kind.column} IS NOT NULL"
        query += " ORDER BY created_at ASC, rowid ASC"
        rows = self.conn.execute(query, (fight_id,)).fetchall()
        return [ShotRecord.from_row(r) for r in rows]

    def group_by_participant(
        self,
        fight_id: str,
        kind: ParticipantKind,
    ) -> dict[str, list[ShotRecord]]:
        """Return a fight's shots of one kind, grouped per participant.

        Each group keeps the oldest-first order of ``list_for_fight``.
        """
        groups: dict[str, list[ShotRecord]] = {}
        for shot in self.list_for_fight(fight_id, kind):
            groups.setdefault(shot.participant_id, []).append(shot)
        return groups

    def get(self, fight_id: str, shot_id: str) -> ShotRecord | None:
        """Return a shot if it belongs to this fight."""
        row = self.conn.execute(
            f"SELECT {_SHOT_COLUMNS} FROM shots WHERE id = ? AND fight_id = ?",
            (shot_id, fight_id),
        ).fetchone()
        return ShotRecord.from_row(row) if row else None

    def insert(
        self,
        fight_id: str,
        kind: ParticipantKind | None = None,
        participant_id: str | None = None,
        *,
        initiative: int | None = None,
        created_at: datetime | None = None,
    ) -> ShotRecord:
        """Insert one shot.

        Args:
            fight_id: Owning fight.
            kind: Kind of the bound participant; None with no participant
                inserts a placeholder shot.
            participant_id: Id of the bound participant.
            initiative: Initial initiative value.
            created_at: Creation time; defaults to now.

        Returns:
            The inserted shot.
        """
        shot_id = str(uuid.uuid4())
        character_id = participant_id if kind is ParticipantKind.CHARACTER else None
        vehicle_id = participant_id if kind is ParticipantKind.VEHICLE else None
        stamp = utc_timestamp(created_at)
        self.conn.execute(
            "INSERT INTO shots (id, fight_id, character_id, vehicle_id, initiative, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (shot_id, fight_id, character_id, vehicle_id, initiative, stamp),
        )
        return ShotRecord(
            id=shot_id,
            fight_id=fight_id,
            character_id=character_id,
            vehicle_id=vehicle_id,
            initiative=initiative,
            created_at=datetime.fromisoformat(stamp),
        )

    def delete(self, shot_ids: Sequence[str]) -> int:
        """Delete shots, first clearing driver links that point at them.

        Returns:
            Number of shots deleted.
        """
        if not shot_ids:
            return 0
        ids = list(shot_ids)
        marks = _placeholders(len(ids))
        self.conn.execute(
            f"UPDATE shots SET driver_shot_id = NULL WHERE driver_shot_id IN ({marks})",
            ids,
        )
        self.conn.execute(
            f"UPDATE shots SET driving_shot_id = NULL WHERE driving_shot_id IN ({marks})",
            ids,
        )
        cursor = self.conn.execute(f"DELETE FROM shots WHERE id IN ({marks})", ids)
        return cursor.rowcount

    def set_initiative(self, shot_id: str, initiative: int | None) -> None:
        """Store a shot's initiative value."""
        self.conn.execute(
            "UPDATE shots SET initiative = ? WHERE id = ?",
            (initiative, shot_id),
        )

    def link_driver(self, driver_shot_id: str, vehicle_shot_id: str) -> None:
        """Record that a character shot drives a vehicle shot."""
        self.conn.execute(
            "UPDATE shots SET driving_shot_id = ? WHERE id = ?",
            (vehicle_shot_id, driver_shot_id),
        )
        self.conn.execute(
            "UPDATE shots SET driver_shot_id = ? WHERE id = ?",
            (driver_shot_id, vehicle_shot_id),
        )


__all__ = ["RosterStore"]
