"""Tests for the party slot store."""

from __future__ import annotations

import pytest

from shot_roster.core.exceptions import InvalidArgumentError
from shot_roster.storage.database import Database
from shot_roster.storage.records import PartyRecord
from shot_roster.storage.slot_store import SlotStore


class TestSlotStore:
    """Tests for SlotStore."""

    def test_next_position(self, database: Database, party: PartyRecord) -> None:
        """Test positions start at zero and follow the highest one."""
        with database.transaction() as conn:
            store = SlotStore(conn)
            assert store.next_position(party.id) == 0

            store.insert(party.id, "boss", 0)
            store.insert(party.id, "mook", 4)

            assert store.next_position(party.id) == 5
            assert store.count(party.id) == 2

    def test_get_scoped_to_party(self, database: Database, party: PartyRecord, other_party: PartyRecord) -> None:
        """Test a slot of another party reads as absent."""
        with database.transaction() as conn:
            store = SlotStore(conn)
            slot = store.insert(party.id, "boss", 0, character_id="c1")

            assert store.get(party.id, slot.id) == slot
            assert store.get(other_party.id, slot.id) is None
            assert store.delete(other_party.id, slot.id) is False

    def test_update_whitelist(self, database: Database, party: PartyRecord) -> None:
        """Test only slot content columns can be updated."""
        with database.transaction() as conn:
            store = SlotStore(conn)
            slot = store.insert(party.id, "mook", 0, default_mook_count=8)

            updated = store.update(slot, {"role": "ally", "default_mook_count": None})
            assert (updated.role, updated.default_mook_count) == ("ally", None)

            with pytest.raises(InvalidArgumentError) as exc_info:
                store.update(slot, {"position": 9, "party_id": "elsewhere"})

            assert exc_info.value.field_name == "party_id"
            assert exc_info.value.details["fields"] == ["party_id", "position"]
            assert store.get(party.id, slot.id) == updated

    def test_reindex(self, database: Database, party: PartyRecord) -> None:
        """Test reindex closes gaps while keeping order."""
        with database.transaction() as conn:
            store = SlotStore(conn)
            first = store.insert(party.id, "boss", 0)
            middle = store.insert(party.id, "featured_foe", 1)
            last = store.insert(party.id, "mook", 2)

            store.delete(party.id, middle.id)
            store.reindex(party.id)
            slots = store.list_for_party(party.id)

        assert [(s.id, s.position) for s in slots] == [(first.id, 0), (last.id, 1)]

    def test_delete_all(self, database: Database, party: PartyRecord, other_party: PartyRecord) -> None:
        """Test delete_all only touches one party."""
        with database.transaction() as conn:
            store = SlotStore(conn)
            store.insert(party.id, "boss", 0)
            store.insert(party.id, "mook", 1)
            store.insert(other_party.id, "ally", 0)

            assert store.delete_all(party.id) == 2
            assert store.count(other_party.id) == 1
