"""Integration tests for building a party and dropping it into a fight."""

from __future__ import annotations

from collections import Counter

import pytest

from shot_roster.core.exceptions import NotFoundError
from shot_roster.engine.composer import PartyComposer
from shot_roster.engine.reconciler import RosterReconciler
from shot_roster.models.enums import ParticipantKind
from shot_roster.storage.records import FightRecord, PartyRecord


def _counts(reconciler: RosterReconciler, fight_id: str, kind: ParticipantKind) -> Counter[str]:
    return Counter(shot.participant_id for shot in reconciler.list_roster(fight_id, kind))


class TestPartyToFight:
    """Test template, fill and add-party end to end."""

    def test_template_fill_and_add(
        self,
        composer: PartyComposer,
        reconciler: RosterReconciler,
        party: PartyRecord,
        fight: FightRecord,
    ) -> None:
        """Only filled slots become shots, one each, mook counts ignored."""
        slots = composer.apply_template(party.id, "boss_fight")
        composer.populate_slot(party.id, slots[0].id, "big-boss")
        composer.populate_slot(party.id, slots[1].id, "lieutenant")
        composer.populate_slot(party.id, slots[3].id, "mook-squad")
        getaway = composer.add_slot(party.id, "getaway", vehicle_id="car")

        created = composer.add_party_to_fight(fight.id, party.id)

        assert created == 4
        assert _counts(reconciler, fight.id, ParticipantKind.CHARACTER) == Counter(
            {"big-boss": 1, "lieutenant": 1, "mook-squad": 1}
        )
        assert _counts(reconciler, fight.id, ParticipantKind.VEHICLE) == Counter({getaway.vehicle_id: 1})

    def test_additive(
        self,
        composer: PartyComposer,
        reconciler: RosterReconciler,
        party: PartyRecord,
        fight: FightRecord,
    ) -> None:
        """Adding a party keeps existing shots and duplicates on repeat."""
        reconciler.reconcile(fight.id, "character", ["hero"])
        composer.add_slot(party.id, "boss", character_id="villain")

        composer.add_party_to_fight(fight.id, party.id)
        composer.add_party_to_fight(fight.id, party.id)

        assert _counts(reconciler, fight.id, ParticipantKind.CHARACTER) == Counter(
            {"hero": 1, "villain": 2}
        )

    def test_then_reconcile(
        self,
        composer: PartyComposer,
        reconciler: RosterReconciler,
        party: PartyRecord,
        fight: FightRecord,
    ) -> None:
        """Shots added from a party are reconciled like any others."""
        composer.add_slot(party.id, "mook", character_id="goon")
        composer.add_party_to_fight(fight.id, party.id)
        composer.add_party_to_fight(fight.id, party.id)
        first = reconciler.list_roster(fight.id)[0]

        result = reconciler.reconcile(fight.id, "character", ["goon"])

        assert result.deleted == 1
        assert [s.id for s in reconciler.list_roster(fight.id)] == [first.id]

    def test_empty_party(self, composer: PartyComposer, party: PartyRecord, fight: FightRecord) -> None:
        """An unfilled template adds nothing."""
        composer.apply_template(party.id, "mook_horde")

        assert composer.add_party_to_fight(fight.id, party.id) == 0

    def test_missing_fight_or_party(
        self,
        composer: PartyComposer,
        party: PartyRecord,
        fight: FightRecord,
    ) -> None:
        """Missing fight or party raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            composer.add_party_to_fight("missing", party.id)
        assert exc_info.value.resource == "fight"

        with pytest.raises(NotFoundError) as exc_info:
            composer.add_party_to_fight(fight.id, "missing")
        assert exc_info.value.resource == "party"
