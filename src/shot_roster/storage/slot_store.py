"""Persistence for party slots."""

from __future__ import annotations

import sqlite3
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from shot_roster.core.constants import FIRST_SLOT_POSITION
from shot_roster.core.exceptions import InvalidArgumentError
from shot_roster.storage.database import utc_timestamp
from shot_roster.storage.records import SlotRecord


_SLOT_COLUMNS = (
    "id, party_id, role, position, character_id, vehicle_id, "
    "default_mook_count, created_at"
)

_UPDATABLE_COLUMNS = frozenset({"role", "character_id", "vehicle_id", "default_mook_count"})


class SlotStore:
    """Reads and writes party slots on an open connection.

    Every single-slot lookup is scoped by party id; a slot id from another
    party reads as absent.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def list_for_party(self, party_id: str) -> list[SlotRecord]:
        """Return a party's slots in position order."""
        rows = self.conn.execute(
            f"SELECT {_SLOT_COLUMNS} FROM party_slots WHERE party_id = ? "
            "ORDER BY position ASC, created_at ASC, rowid ASC",
            (party_id,),
        ).fetchall()
        return [SlotRecord.from_row(r) for r in rows]

    def get(self, party_id: str, slot_id: str) -> SlotRecord | None:
        """Return a slot if it belongs to this party."""
        row = self.conn.execute(
            f"SELECT {_SLOT_COLUMNS} FROM party_slots WHERE id = ? AND party_id = ?",
            (slot_id, party_id),
        ).fetchone()
        return SlotRecord.from_row(row) if row else None

    def count(self, party_id: str) -> int:
        """Number of slots in a party."""
        row = self.conn.execute(
            "SELECT COUNT(*) FROM party_slots WHERE party_id = ?",
            (party_id,),
        ).fetchone()
        return row[0] if row else 0

    def next_position(self, party_id: str) -> int:
        """Position a newly appended slot should take."""
        row = self.conn.execute(
            "SELECT MAX(position) FROM party_slots WHERE party_id = ?",
            (party_id,),
        ).fetchone()
        if row is None or row[0] is None:
            return FIRST_SLOT_POSITION
        return row[0] + 1

    def insert(
        self,
        party_id: str,
        role: str,
        position: int,
        *,
        character_id: str | None = None,
        vehicle_id: str | None = None,
        default_mook_count: int | None = None,
    ) -> SlotRecord:
        """Insert one slot at the given position and return it."""
        slot_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO party_slots "
            "(id, party_id, role, position, character_id, vehicle_id, default_mook_count, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                slot_id,
                party_id,
                role,
                position,
                character_id,
                vehicle_id,
                default_mook_count,
                utc_timestamp(),
            ),
        )
        return self.get(party_id, slot_id)

    def update(self, slot: SlotRecord, changes: Mapping[str, Any]) -> SlotRecord:
        """Apply column changes to a slot and return the fresh row.

        Raises:
            InvalidArgumentError: If a change names a column that cannot be updated.
        """
        unknown = sorted(set(changes) - _UPDATABLE_COLUMNS)
        if unknown:
            raise InvalidArgumentError(
                "Slot field cannot be updated",
                field_name=unknown[0],
                details={"fields": unknown},
            )
        if changes:
            columns = sorted(changes)
            assignments = ", ".join(f"{column} = ?" for column in columns)
            self.conn.execute(
                f"UPDATE party_slots SET {assignments} WHERE id = ? AND party_id = ?",
                (*(changes[c] for c in columns), slot.id, slot.party_id),
            )
        return self.get(slot.party_id, slot.id)

    def delete(self, party_id: str, slot_id: str) -> bool:
        """Delete a slot of this party."""
        cursor = self.conn.execute(
            "DELETE FROM party_slots WHERE id = ? AND party_id = ?",
            (slot_id, party_id),
        )
        return cursor.rowcount > 0

    def delete_all(self, party_id: str) -> int:
        """Delete every slot of a party."""
        cursor = self.conn.execute(
            "DELETE FROM party_slots WHERE party_id = ?",
            (party_id,),
        )
        return cursor.rowcount

    def set_positions(self, party_id: str, ordered_slot_ids: Sequence[str]) -> None:
        """Give each listed slot the position of its index in the list."""
        self.conn.executemany(
            "UPDATE party_slots SET position = ? WHERE id = ? AND party_id = ?",
            [
                (FIRST_SLOT_POSITION + index, slot_id, party_id)
                for index, slot_id in enumerate(ordered_slot_ids)
            ],
        )

    def reindex(self, party_id: str) -> None:
        """Close gaps so positions run 0..n-1 in the current order."""
        self.set_positions(party_id, [slot.id for slot in self.list_for_party(party_id)])


__all__ = ["SlotStore"]
