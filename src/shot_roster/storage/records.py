"""Row records returned by the storage layer.

Plain dataclasses built from ``sqlite3.Row`` objects. They are snapshots:
mutating one does not write anything back.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime

from shot_roster.models.enums import ParticipantKind


def _participant(character_id: str | None, vehicle_id: str | None) -> tuple[ParticipantKind | None, str | None]:
    if character_id is not None:
        return ParticipantKind.CHARACTER, character_id
    if vehicle_id is not None:
        return ParticipantKind.VEHICLE, vehicle_id
    return None, None


@dataclass(frozen=True)
class FightRecord:
    """A combat encounter within a campaign.

    Attributes:
        id: Unique fight identifier.
        campaign_id: Owning campaign.
        name: Display name.
        created_at: When the fight was created.
    """

    id: str
    campaign_id: str
    name: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> FightRecord:
        """Create from database row."""
        return cls(
            id=row["id"],
            campaign_id=row["campaign_id"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


@dataclass(frozen=True)
class PartyRecord:
    """A reusable composition of role slots within a campaign.

    Attributes:
        id: Unique party identifier.
        campaign_id: Owning campaign.
        name: Display name.
        created_at: When the party was created.
    """

    id: str
    campaign_id: str
    name: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> PartyRecord:
        """Create from database row."""
        return cls(
            id=row["id"],
            campaign_id=row["campaign_id"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


@dataclass(frozen=True)
class ShotRecord:
    """One participant instance in a fight's roster.

    Attributes:
        id: Unique shot identifier.
        fight_id: Owning fight.
        character_id: Bound character, if any.
        vehicle_id: Bound vehicle, if any.
        initiative: Optional initiative value.
        created_at: Creation time; older shots survive trimming.
        driver_shot_id: On a vehicle shot, the shot of the character driving it.
        driving_shot_id: On a character shot, the vehicle shot it drives.
    """

    id: str
    fight_id: str
    character_id: str | None
    vehicle_id: str | None
    initiative: int | None
    created_at: datetime
    driver_shot_id: str | None = None
    driving_shot_id: str | None = None

    @property
    def kind(self) -> ParticipantKind | None:
        """Kind of the bound participant, or None for a placeholder."""
        return _participant(self.character_id, self.vehicle_id)[0]

    @property
    def participant_id(self) -> str | None:
        """Id of the bound participant, or None for a placeholder."""
        return _participant(self.character_id, self.vehicle_id)[1]

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> ShotRecord:
        """Create from database row."""
        return cls(
            id=row["id"],
            fight_id=row["fight_id"],
            character_id=row["character_id"],
            vehicle_id=row["vehicle_id"],
            initiative=row["initiative"],
            created_at=datetime.fromisoformat(row["created_at"]),
            driver_shot_id=row["driver_shot_id"],
            driving_shot_id=row["driving_shot_id"],
        )


@dataclass(frozen=True)
class SlotRecord:
    """An ordered, role-tagged position within a party.

    Attributes:
        id: Unique slot identifier.
        party_id: Owning party.
        role: Free-form role tag.
        position: Zero-based position within the party.
        character_id: Bound character, if any.
        vehicle_id: Bound vehicle, if any.
        default_mook_count: Display-only mook count.
        created_at: Creation time.
    """

    id: str
    party_id: str
    role: str
    position: int
    character_id: str | None
    vehicle_id: str | None
    default_mook_count: int | None
    created_at: datetime

    @property
    def kind(self) -> ParticipantKind | None:
        """Kind of the bound participant, or None for an open slot."""
        return _participant(self.character_id, self.vehicle_id)[0]

    @property
    def participant_id(self) -> str | None:
        """Id of the bound participant, or None for an open slot."""
        return _participant(self.character_id, self.vehicle_id)[1]

    @property
    def is_bound(self) -> bool:
        """Whether a character or vehicle fills this slot."""
        return self.participant_id is not None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> SlotRecord:
        """Create from database row."""
        return cls(
            id=row["id"],
            party_id=row["party_id"],
            role=row["role"],
            position=row["position"],
            character_id=row["character_id"],
            vehicle_id=row["vehicle_id"],
            default_mook_count=row["default_mook_count"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


__all__ = [
    "FightRecord",
    "PartyRecord",
    "ShotRecord",
    "SlotRecord",
]
