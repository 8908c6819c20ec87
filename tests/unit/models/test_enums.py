"""Tests for enumeration types."""

from __future__ import annotations

import pytest

from shot_roster.core.exceptions import InvalidArgumentError
from shot_roster.models.enums import ParticipantKind, SlotRole


class TestParticipantKind:
    """Tests for ParticipantKind."""

    def test_columns(self) -> None:
        """Test each kind maps to its reference column and payload key."""
        assert ParticipantKind.CHARACTER.column == "character_id"
        assert ParticipantKind.VEHICLE.column == "vehicle_id"
        assert ParticipantKind.CHARACTER.ids_key == "character_ids"
        assert ParticipantKind.VEHICLE.ids_key == "vehicle_ids"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("character", ParticipantKind.CHARACTER),
            ("vehicle", ParticipantKind.VEHICLE),
            (ParticipantKind.VEHICLE, ParticipantKind.VEHICLE),
        ],
    )
    def test_parse(self, value: object, expected: ParticipantKind) -> None:
        """Test strings and members parse to members."""
        assert ParticipantKind.parse(value) is expected

    @pytest.mark.parametrize("value", ["monster", "Character", "", None, 3])
    def test_parse_rejects_unknown(self, value: object) -> None:
        """Test unknown kinds raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            ParticipantKind.parse(value)

        assert exc_info.value.field_name == "kind"


class TestSlotRole:
    """Tests for SlotRole."""

    def test_values(self) -> None:
        """Test template roles render as their tags."""
        assert str(SlotRole.FEATURED_FOE) == "featured_foe"
        assert {role.value for role in SlotRole} == {"boss", "featured_foe", "mook", "ally"}
