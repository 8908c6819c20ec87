"""Enumeration types for the shot-roster engine."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from shot_roster.core.exceptions import InvalidArgumentError


class ParticipantKind(StrEnum):
    """Category of participant a shot or slot is bound to.

    Each kind maps to exactly one reference column on the ``shots`` and
    ``party_slots`` tables. Reconciliation always runs per kind, so
    character shots and vehicle shots never affect each other.
    """

    CHARACTER = "character"
    VEHICLE = "vehicle"

    @property
    def column(self) -> str:
        """Name of the reference column for this kind.

        Returns:
            ``character_id`` or ``vehicle_id``.
        """
        return f"{self.value}_id"

    @property
    def ids_key(self) -> str:
        """Key carrying this kind's desired ids in a roster update payload.

        Returns:
            ``character_ids`` or ``vehicle_ids``.
        """
        return f"{self.value}_ids"

    @classmethod
    def parse(cls, value: Any) -> ParticipantKind:
        """Coerce a caller-supplied kind into a ParticipantKind.

        Args:
            value: A ParticipantKind or its string value.

        Returns:
            The matching ParticipantKind.

        Raises:
            InvalidArgumentError: If the value names no known kind.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidArgumentError(
                "Unrecognized participant kind",
                field_name="kind",
                invalid_value=value,
            ) from exc


class SlotRole(StrEnum):
    """Roles used by the built-in party templates.

    Slots created by hand may carry any role tag; these are the ones the
    template catalog stamps onto a party.
    """

    BOSS = "boss"
    FEATURED_FOE = "featured_foe"
    MOOK = "mook"
    ALLY = "ally"


__all__ = [
    "ParticipantKind",
    "SlotRole",
]
