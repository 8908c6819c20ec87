"""Fight and party lookups.

Fights and parties belong to the campaign layer; the engine only needs to
resolve them by id (with NotFound semantics) inside its own transactions.
The create/delete helpers exist for that campaign layer and for tests.
"""

from __future__ import annotations

import sqlite3
import uuid

from shot_roster.core.exceptions import NotFoundError
from shot_roster.storage.database import utc_timestamp
from shot_roster.storage.records import FightRecord, PartyRecord


class Directory:
    """Resolves fights and parties on an open connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # -- Fights --

    def create_fight(self, campaign_id: str, name: str) -> FightRecord:
        """Insert a fight and return it."""
        fight_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO fights (id, campaign_id, name, created_at) VALUES (?, ?, ?, ?)",
            (fight_id, campaign_id, name, utc_timestamp()),
        )
        return self.require_fight(fight_id)

    def get_fight(self, fight_id: str) -> FightRecord | None:
        """Return the fight with this id, or None."""
        row = self.conn.execute(
            "SELECT id, campaign_id, name, created_at FROM fights WHERE id = ?",
            (fight_id,),
        ).fetchone()
        return FightRecord.from_row(row) if row else None

    def require_fight(self, fight_id: str) -> FightRecord:
        """Return the fight with this id.

        Raises:
            NotFoundError: If no such fight exists.
        """
        fight = self.get_fight(fight_id)
        if fight is None:
            raise NotFoundError("fight", fight_id)
        return fight

    def delete_fight(self, fight_id: str) -> bool:
        """Delete a fight; its shots go with it."""
        cursor = self.conn.execute("DELETE FROM fights WHERE id = ?", (fight_id,))
        return cursor.rowcount > 0

    # -- Parties --

    def create_party(self, campaign_id: str, name: str) -> PartyRecord:
        """Insert a party and return it."""
        party_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO parties (id, campaign_id, name, created_at) VALUES (?, ?, ?, ?)",
            (party_id, campaign_id, name, utc_timestamp()),
        )
        return self.require_party(party_id)

    def get_party(self, party_id: str) -> PartyRecord | None:
        """Return the party with this id, or None."""
        row = self.conn.execute(
            "SELECT id, campaign_id, name, created_at FROM parties WHERE id = ?",
            (party_id,),
        ).fetchone()
        return PartyRecord.from_row(row) if row else None

    def require_party(self, party_id: str) -> PartyRecord:
        """Return the party with this id.

        Raises:
            NotFoundError: If no such party exists.
        """
        party = self.get_party(party_id)
        if party is None:
            raise NotFoundError("party", party_id)
        return party

    def delete_party(self, party_id: str) -> bool:
        """Delete a party; its slots go with it."""
        cursor = self.conn.execute("DELETE FROM parties WHERE id = ?", (party_id,))
        return cursor.rowcount > 0


__all__ = ["Directory"]
