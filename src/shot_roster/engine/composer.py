"""Party composition.

A party is an ordered list of role slots (boss, featured foe, mook, ally or
any custom tag). Slots start open and are later filled with a character or a
vehicle. A party can be stamped out from a template, edited slot by slot and
finally dropped into a fight, which adds one shot per filled slot.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from shot_roster.core.constants import FIRST_SLOT_POSITION
from shot_roster.core.exceptions import InvalidArgumentError, NotFoundError
from shot_roster.core.logging import get_logger
from shot_roster.engine import templates
from shot_roster.engine.reconciler import RosterReconciler
from shot_roster.engine.templates import PartyTemplate
from shot_roster.models.requests import NewSlot, SlotOrder, SlotUpdate, parse_request
from shot_roster.storage.database import Database, get_database
from shot_roster.storage.directory import Directory
from shot_roster.storage.records import ShotRecord, SlotRecord
from shot_roster.storage.slot_store import SlotStore

logger = get_logger(__name__)


class PartyComposer:
    """Builds and edits party compositions.

    Every slot lookup is scoped to the party named in the call. A slot id
    belonging to a different party is reported as not found and is never
    modified.
    """

    def __init__(
        self,
        database: Database | None = None,
        reconciler: RosterReconciler | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            database: Backing database; defaults to the global instance.
            reconciler: Supplies the shot create-path for add-party;
                defaults to one on the same database.
        """
        self.database = database or get_database()
        self.reconciler = reconciler or RosterReconciler(self.database)

    # =========================================================================
    # Templates
    # =========================================================================

    def list_templates(self) -> list[PartyTemplate]:
        """Return the template catalog, sorted by display name."""
        return templates.list_templates()

    def get_template(self, key: Any) -> PartyTemplate:
        """Return one template.

        Raises:
            InvalidTemplateKeyError: If the key is unknown.
        """
        return templates.get_template(key)

    def template_keys(self) -> list[str]:
        """Return the valid template keys."""
        return templates.template_keys()

    def is_valid_template(self, key: Any) -> bool:
        """Check whether a key names a template."""
        return templates.is_valid_template(key)

    def apply_template(self, party_id: str, template_key: Any) -> list[SlotRecord]:
        """Replace a party's slots with a template's blueprints.

        All existing slots are deleted, including filled ones, and one open
        slot per blueprint is created at positions 0..n-1.

        Args:
            party_id: Party to rebuild.
            template_key: Catalog key, e.g. "boss_fight".

        Returns:
            The new slots in position order.

        Raises:
            InvalidTemplateKeyError: If the key is unknown. Checked first,
                so a bad key never touches the party.
            NotFoundError: If the party does not exist.
            PersistenceError: If the database write fails.
        """
        template = templates.get_template(template_key)

        with self.database.transaction("apply_template") as conn:
            Directory(conn).require_party(party_id)
            store = SlotStore(conn)
            removed = store.delete_all(party_id)
            for position, blueprint in enumerate(template.slots, start=FIRST_SLOT_POSITION):
                store.insert(
                    party_id,
                    str(blueprint.role),
                    position,
                    default_mook_count=blueprint.default_mook_count,
                )
            slots = store.list_for_party(party_id)

        logger.info(
            "Template applied",
            party_id=party_id,
            template=template.key,
            removed=removed,
            created=len(slots),
        )
        return slots

    # =========================================================================
    # Slot CRUD
    # =========================================================================

    def add_slot(
        self,
        party_id: str,
        role: str,
        character_id: str | None = None,
        vehicle_id: str | None = None,
        default_mook_count: int | None = None,
    ) -> SlotRecord:
        """Append a slot after the party's last one.

        Args:
            party_id: Owning party.
            role: Role tag.
            character_id: Optional character to bind.
            vehicle_id: Optional vehicle to bind.
            default_mook_count: Display-only mook count.

        Returns:
            The created slot.

        Raises:
            InvalidArgumentError: If the fields are malformed or bind both a
                character and a vehicle.
            NotFoundError: If the party does not exist.
        """
        request = parse_request(
            NewSlot,
            {
                "role": role,
                "character_id": character_id,
                "vehicle_id": vehicle_id,
                "default_mook_count": default_mook_count,
            },
        )

        with self.database.transaction("add_slot") as conn:
            Directory(conn).require_party(party_id)
            store = SlotStore(conn)
            slot = store.insert(
                party_id,
                request.role,
                store.next_position(party_id),
                character_id=request.character_id,
                vehicle_id=request.vehicle_id,
                default_mook_count=request.default_mook_count,
            )

        logger.debug("Slot added", party_id=party_id, slot_id=slot.id, role=slot.role, position=slot.position)
        return slot

    def update_slot(
        self,
        party_id: str,
        slot_id: str,
        fields: SlotUpdate | Mapping[str, Any],
    ) -> SlotRecord:
        """Apply a partial update to a slot.

        Only the supplied fields change. A null ``character_id`` or
        ``vehicle_id`` detaches that participant and keeps the slot.

        Args:
            party_id: Party the slot must belong to.
            slot_id: Slot to update.
            fields: Fields to change.

        Returns:
            The updated slot.

        Raises:
            InvalidArgumentError: If the fields are malformed, or the result
                would bind both a character and a vehicle.
            NotFoundError: If the party or the slot (within this party) is
                missing.
        """
        request = parse_request(SlotUpdate, fields)
        changes = request.changes()

        with self.database.transaction("update_slot") as conn:
            Directory(conn).require_party(party_id)
            store = SlotStore(conn)
            slot = self._require_slot(store, party_id, slot_id)

            character_id = changes.get("character_id", slot.character_id)
            vehicle_id = changes.get("vehicle_id", slot.vehicle_id)
            if character_id is not None and vehicle_id is not None:
                raise InvalidArgumentError(
                    "A slot cannot hold both a character and a vehicle; clear one first",
                    field_name="vehicle_id" if "vehicle_id" in changes else "character_id",
                )

            updated = store.update(slot, changes)

        logger.debug("Slot updated", party_id=party_id, slot_id=slot_id, fields=sorted(changes))
        return updated

    def populate_slot(self, party_id: str, slot_id: str, character_id: str) -> SlotRecord:
        """Fill a slot with a character, replacing any bound vehicle."""
        return self.update_slot(party_id, slot_id, {"character_id": character_id, "vehicle_id": None})

    def populate_slot_with_vehicle(self, party_id: str, slot_id: str, vehicle_id: str) -> SlotRecord:
        """Fill a slot with a vehicle, replacing any bound character."""
        return self.update_slot(party_id, slot_id, {"vehicle_id": vehicle_id, "character_id": None})

    def clear_slot(self, party_id: str, slot_id: str) -> SlotRecord:
        """Detach whatever fills a slot, leaving it open."""
        return self.update_slot(party_id, slot_id, {"character_id": None, "vehicle_id": None})

    def remove_slot(self, party_id: str, slot_id: str) -> None:
        """Delete a slot and close the gap in positions.

        Raises:
            NotFoundError: If the party or the slot (within this party) is
                missing.
        """
        with self.database.transaction("remove_slot") as conn:
            Directory(conn).require_party(party_id)
            store = SlotStore(conn)
            if not store.delete(party_id, slot_id):
                raise NotFoundError("slot", slot_id)
            store.reindex(party_id)

        logger.debug("Slot removed", party_id=party_id, slot_id=slot_id)

    def reorder_slots(self, party_id: str, ordered_slot_ids: SlotOrder | Sequence[str]) -> list[SlotRecord]:
        """Set slot positions from an ordered list of ids.

        Listed slots take positions 0..k-1 in list order. Slots of the party
        left out of the list follow them, keeping their previous relative
        order.

        Args:
            party_id: Party to reorder.
            ordered_slot_ids: Slot ids, first slot first.

        Returns:
            The party's slots in their new order.

        Raises:
            InvalidArgumentError: If the list is malformed or repeats an id.
            NotFoundError: If the party is missing or a listed id is not one
                of its slots.
        """
        payload = ordered_slot_ids if isinstance(ordered_slot_ids, SlotOrder) else {"slot_ids": ordered_slot_ids}
        order = parse_request(SlotOrder, payload)

        with self.database.transaction("reorder_slots") as conn:
            Directory(conn).require_party(party_id)
            store = SlotStore(conn)
            current = store.list_for_party(party_id)
            known = {slot.id for slot in current}
            for slot_id in order.slot_ids:
                if slot_id not in known:
                    raise NotFoundError("slot", slot_id)

            listed = set(order.slot_ids)
            final_order = [*order.slot_ids, *(slot.id for slot in current if slot.id not in listed)]
            store.set_positions(party_id, final_order)
            slots = store.list_for_party(party_id)

        logger.debug("Slots reordered", party_id=party_id, count=len(slots))
        return slots

    # =========================================================================
    # Queries
    # =========================================================================

    def list_slots(self, party_id: str) -> list[SlotRecord]:
        """Return a party's slots in position order.

        Raises:
            NotFoundError: If the party does not exist.
        """
        with self.database.connection("list_slots") as conn:
            Directory(conn).require_party(party_id)
            return SlotStore(conn).list_for_party(party_id)

    def get_slot(self, party_id: str, slot_id: str) -> SlotRecord:
        """Return one slot of a party.

        Raises:
            NotFoundError: If the slot is missing or belongs to another party.
        """
        with self.database.connection("get_slot") as conn:
            return self._require_slot(SlotStore(conn), party_id, slot_id)

    def has_composition(self, party_id: str) -> bool:
        """Whether the party has any slots.

        Raises:
            NotFoundError: If the party does not exist.
        """
        with self.database.connection("has_composition") as conn:
            Directory(conn).require_party(party_id)
            return SlotStore(conn).count(party_id) > 0

    # =========================================================================
    # Fights
    # =========================================================================

    def add_party_to_fight(self, fight_id: str, party_id: str) -> int:
        """Add one shot per filled slot of a party to a fight.

        Open slots are skipped and ``default_mook_count`` is ignored. The
        fight's existing shots are left alone, so adding a party twice adds
        its members twice.

        Args:
            fight_id: Fight receiving the shots.
            party_id: Party to add.

        Returns:
            Number of shots created.

        Raises:
            NotFoundError: If the fight or the party does not exist.
            PersistenceError: If the database write fails.
        """
        with self.database.transaction("add_party_to_fight") as conn:
            directory = Directory(conn)
            directory.require_fight(fight_id)
            directory.require_party(party_id)

            created: list[ShotRecord] = []
            for slot in SlotStore(conn).list_for_party(party_id):
                if slot.is_bound:
                    created.extend(
                        self.reconciler.append_entries(conn, fight_id, slot.kind, [slot.participant_id])
                    )

        logger.info("Party added to fight", fight_id=fight_id, party_id=party_id, created=len(created))
        return len(created)

    @staticmethod
    def _require_slot(store: SlotStore, party_id: str, slot_id: str) -> SlotRecord:
        slot = store.get(party_id, slot_id)
        if slot is None:
            raise NotFoundError("slot", slot_id)
        return slot


__all__ = ["PartyComposer"]
