"""Typed models for the shot-roster engine.

Enumerations (participant kinds, template roles) and the per-operation
request models validated at the engine boundary.
"""

from __future__ import annotations

from shot_roster.models.enums import ParticipantKind, SlotRole
from shot_roster.models.requests import (
    NewSlot,
    RosterUpdate,
    SlotOrder,
    SlotUpdate,
    parse_desired_ids,
    parse_request,
)


__all__ = [
    # Enums
    "ParticipantKind",
    "SlotRole",
    # Requests
    "RosterUpdate",
    "NewSlot",
    "SlotUpdate",
    "SlotOrder",
    "parse_request",
    "parse_desired_ids",
]
