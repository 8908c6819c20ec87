"""Typed request models for the roster and party-composition operations.

The request layer hands the engine loosely-typed JSON bodies. Each operation
gets its own Pydantic V2 model here, and the ``parse_*`` helpers turn
validation failures into InvalidArgumentError before anything touches the
database.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from shot_roster.core.constants import ROLE_MAX_LENGTH
from shot_roster.core.exceptions import InvalidArgumentError
from shot_roster.models.enums import ParticipantKind


# =============================================================================
# Type Definitions
# =============================================================================


ParticipantId = Annotated[str, Field(min_length=1, description="Character or vehicle id")]
SlotId = Annotated[str, Field(min_length=1, description="Slot id")]
RoleTag = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=ROLE_MAX_LENGTH),
]
MookCount = Annotated[int, Field(ge=0, description="Display count of mooks in the slot")]

RequestT = TypeVar("RequestT", bound=BaseModel)

_DESIRED_IDS = TypeAdapter(list[ParticipantId])


# =============================================================================
# Roster Requests
# =============================================================================


class RosterUpdate(BaseModel):
    """Desired roster of a fight, one optional id list per participant kind.

    A kind whose list is omitted (or null) is left untouched. An empty list
    removes every shot of that kind. Ids may repeat; each repetition is one
    more shot for that participant.

    Attributes:
        character_ids: Desired character ids, with duplicates.
        vehicle_ids: Desired vehicle ids, with duplicates.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    character_ids: list[ParticipantId] | None = None
    vehicle_ids: list[ParticipantId] | None = None

    def desired_by_kind(self) -> dict[ParticipantKind, list[str]]:
        """Return the supplied id lists keyed by kind.

        Returns:
            Mapping containing only the kinds present in the update.
        """
        desired: dict[ParticipantKind, list[str]] = {}
        for kind in ParticipantKind:
            ids = getattr(self, kind.ids_key)
            if ids is not None:
                desired[kind] = list(ids)
        return desired


# =============================================================================
# Slot Requests
# =============================================================================


class NewSlot(BaseModel):
    """Fields of a slot appended to a party.

    Attributes:
        role: Role tag, e.g. "boss" or "mook".
        character_id: Optional bound character.
        vehicle_id: Optional bound vehicle.
        default_mook_count: Display-only mook count.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: RoleTag
    character_id: ParticipantId | None = None
    vehicle_id: ParticipantId | None = None
    default_mook_count: MookCount | None = None

    @model_validator(mode="after")
    def validate_single_binding(self) -> "NewSlot":
        """Reject slots bound to a character and a vehicle at once."""
        if self.character_id is not None and self.vehicle_id is not None:
            raise ValueError("a slot cannot hold both a character and a vehicle")
        return self


class SlotUpdate(BaseModel):
    """Partial update of a slot.

    Only the fields present in the payload are applied. Passing
    ``character_id=None`` (or ``vehicle_id=None``) detaches the participant
    while keeping the slot.

    Attributes:
        role: New role tag.
        character_id: New bound character, or None to detach.
        vehicle_id: New bound vehicle, or None to detach.
        default_mook_count: New display-only mook count, or None to drop it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: RoleTag | None = None
    character_id: ParticipantId | None = None
    vehicle_id: ParticipantId | None = None
    default_mook_count: MookCount | None = None

    @model_validator(mode="after")
    def validate_fields(self) -> "SlotUpdate":
        """Reject a cleared role and a double binding."""
        if "role" in self.model_fields_set and self.role is None:
            raise ValueError("role cannot be cleared")
        if self.character_id is not None and self.vehicle_id is not None:
            raise ValueError("a slot cannot hold both a character and a vehicle")
        return self

    def changes(self) -> dict[str, Any]:
        """Return the explicitly supplied fields and their new values.

        Returns:
            Column name to value, limited to the fields the caller set.
        """
        return {name: getattr(self, name) for name in self.model_fields_set}


class SlotOrder(BaseModel):
    """Desired order of a party's slots.

    Attributes:
        slot_ids: Slot ids, first slot first.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    slot_ids: list[SlotId]

    @model_validator(mode="after")
    def validate_unique(self) -> "SlotOrder":
        """Reject orders that list the same slot twice."""
        if len(set(self.slot_ids)) != len(self.slot_ids):
            raise ValueError("slot ids must be unique")
        return self


# =============================================================================
# Parsing Helpers
# =============================================================================


def _summarize(exc: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    ]


def parse_request(model: type[RequestT], payload: RequestT | Mapping[str, Any]) -> RequestT:
    """Validate a request payload into its typed model.

    Args:
        model: Request model class.
        payload: An instance of the model, or a mapping of raw fields.

    Returns:
        The validated request.

    Raises:
        InvalidArgumentError: If the payload does not fit the model.
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = exc.errors()
        field_name = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        raise InvalidArgumentError(
            f"Invalid {model.__name__} request",
            field_name=field_name or None,
            details={"errors": _summarize(exc)},
        ) from exc


def parse_desired_ids(value: Any, kind: ParticipantKind) -> list[str]:
    """Validate a desired-id list for one participant kind.

    Args:
        value: Caller-supplied list of ids (duplicates allowed).
        kind: Kind the ids refer to, used for the error context.

    Returns:
        The ids as a list of strings, order and duplicates preserved.

    Raises:
        InvalidArgumentError: If the value is not a list of non-empty strings.
    """
    try:
        return _DESIRED_IDS.validate_python(value)
    except PydanticValidationError as exc:
        raise InvalidArgumentError(
            "Desired ids must be a list of participant ids",
            field_name=kind.ids_key,
            details={"errors": _summarize(exc)},
        ) from exc


__all__ = [
    "ParticipantId",
    "SlotId",
    "RoleTag",
    "RosterUpdate",
    "NewSlot",
    "SlotUpdate",
    "SlotOrder",
    "parse_request",
    "parse_desired_ids",
]
