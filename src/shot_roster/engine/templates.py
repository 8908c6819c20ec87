"""Built-in party composition templates.

Templates describe common encounter structures as an ordered list of role
slots. Applying one to a party stamps out one open slot per blueprint. The
catalog is defined once at import time and never changes, so it can be read
from any thread without locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shot_roster.core.exceptions import InvalidTemplateKeyError
from shot_roster.models.enums import SlotRole


class SlotBlueprint(BaseModel):
    """One slot of a template.

    Attributes:
        role: Role stamped onto the slot.
        label: Display label, e.g. "Lieutenant".
        default_mook_count: Display-only mook count for mook slots.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: SlotRole
    label: str
    default_mook_count: int | None = Field(default=None, ge=0)


class PartyTemplate(BaseModel):
    """A named, pre-built set of slot roles.

    Attributes:
        key: Stable lookup key.
        name: Display name; the catalog is listed sorted by it.
        description: One-line summary.
        slots: Blueprints in the order slots are created.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    name: str
    description: str
    slots: tuple[SlotBlueprint, ...]


def _template(key: str, name: str, description: str, *slots: tuple[Any, ...]) -> PartyTemplate:
    return PartyTemplate(
        key=key,
        name=name,
        description=description,
        slots=tuple(
            SlotBlueprint(role=role, label=label, default_mook_count=count)
            for role, label, count in slots
        ),
    )


# =============================================================================
# Catalog
# =============================================================================


_CATALOG: tuple[PartyTemplate, ...] = (
    _template(
        "boss_fight",
        "Boss Fight",
        "A climactic encounter with a major villain and support",
        (SlotRole.BOSS, "Boss", None),
        (SlotRole.FEATURED_FOE, "Lieutenant", None),
        (SlotRole.FEATURED_FOE, "Lieutenant", None),
        (SlotRole.MOOK, "Mook Squad", 12),
    ),
    _template(
        "ambush",
        "Ambush",
        "A surprise attack with a leader and mook groups",
        (SlotRole.FEATURED_FOE, "Leader", None),
        (SlotRole.MOOK, "Ambushers", 8),
        (SlotRole.MOOK, "Backup", 6),
    ),
    _template(
        "mixed_threat",
        "Mixed Threat",
        "A balanced encounter with varied enemy types and an ally",
        (SlotRole.BOSS, "Boss", None),
        (SlotRole.FEATURED_FOE, "Elite", None),
        (SlotRole.ALLY, "Ally NPC", None),
        (SlotRole.MOOK, "Minions", 10),
    ),
    _template(
        "mook_horde",
        "Mook Horde",
        "Waves of unnamed opponents",
        (SlotRole.MOOK, "Wave 1", 15),
        (SlotRole.MOOK, "Wave 2", 15),
        (SlotRole.MOOK, "Wave 3", 15),
    ),
    _template(
        "featured_foes",
        "Featured Foes",
        "A group of named opponents without a boss",
        (SlotRole.FEATURED_FOE, "Featured Foe", None),
        (SlotRole.FEATURED_FOE, "Featured Foe", None),
        (SlotRole.FEATURED_FOE, "Featured Foe", None),
        (SlotRole.MOOK, "Support", 6),
    ),
    _template(
        "uber_boss",
        "Uber-Boss Showdown",
        "A major villain with significant support",
        (SlotRole.BOSS, "Uber-Boss", None),
        (SlotRole.FEATURED_FOE, "Right Hand", None),
        (SlotRole.FEATURED_FOE, "Bodyguard", None),
        (SlotRole.FEATURED_FOE, "Bodyguard", None),
        (SlotRole.MOOK, "Elite Guards", 20),
    ),
    _template(
        "escort",
        "Escort Mission",
        "Protecting an ally from attackers",
        (SlotRole.ALLY, "VIP to Protect", None),
        (SlotRole.FEATURED_FOE, "Attacker Leader", None),
        (SlotRole.MOOK, "Attackers", 12),
    ),
    _template(
        "simple_encounter",
        "Simple Encounter",
        "A basic encounter with a featured foe and mooks",
        (SlotRole.FEATURED_FOE, "Featured Foe", None),
        (SlotRole.MOOK, "Mooks", 8),
    ),
)

_BY_KEY = MappingProxyType({template.key: template for template in _CATALOG})
_SORTED = tuple(sorted(_CATALOG, key=lambda template: template.name))


# =============================================================================
# Lookups
# =============================================================================


def list_templates() -> list[PartyTemplate]:
    """Return every template, sorted by display name."""
    return list(_SORTED)


def get_template(key: Any) -> PartyTemplate:
    """Look up a template by key.

    Args:
        key: Template key, e.g. "boss_fight".

    Returns:
        The matching template.

    Raises:
        InvalidTemplateKeyError: If the key is not a string or not in the catalog.
    """
    if not isinstance(key, str) or key not in _BY_KEY:
        raise InvalidTemplateKeyError(key)
    return _BY_KEY[key]


def template_keys() -> list[str]:
    """Return the valid template keys, sorted."""
    return sorted(_BY_KEY)


def is_valid_template(key: Any) -> bool:
    """Check whether a key names a catalog template."""
    return isinstance(key, str) and key in _BY_KEY


__all__ = [
    "SlotBlueprint",
    "PartyTemplate",
    "list_templates",
    "get_template",
    "template_keys",
    "is_valid_template",
]
