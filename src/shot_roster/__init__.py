"""Shot Roster - Roster reconciliation and party composition engine.

Persistence engine behind a tabletop combat tracker:

- Fight rosters are multisets of shots per participant kind. Callers send
  the desired id list and the engine creates or deletes shots to match,
  always keeping the oldest shot of each participant.
- Parties are ordered lists of role slots, built from templates or by hand,
  that can be dropped into a fight as one shot per filled slot.

Example:
    >>> from shot_roster import Database, PartyComposer, RosterReconciler
    >>>
    >>> database = Database("data/shot_roster.db")
    >>> reconciler = RosterReconciler(database)
    >>> reconciler.sync_roster(fight_id, {"character_ids": ["c1", "c1"]})
    >>>
    >>> composer = PartyComposer(database, reconciler)
    >>> slots = composer.apply_template(party_id, "ambush")
    >>> composer.populate_slot(party_id, slots[0].id, "c2")
    >>> composer.add_party_to_fight(fight_id, party_id)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Enumerations and per-operation request models.
    storage: SQLite database, transactions and row stores.
    engine: Template catalog, reconciler and party composer.
"""

from __future__ import annotations

# Core
from shot_roster.core.config import Settings, get_settings
from shot_roster.core.exceptions import (
    InvalidArgumentError,
    InvalidTemplateKeyError,
    NotFoundError,
    PersistenceError,
    RosterEngineError,
)
from shot_roster.core.logging import configure_logging, get_logger, setup_logging

# Models
from shot_roster.models.enums import ParticipantKind, SlotRole
from shot_roster.models.requests import RosterUpdate, SlotUpdate

# Storage
from shot_roster.storage.database import Database, get_database

# Engine
from shot_roster.engine import (
    PartyComposer,
    PartyTemplate,
    ReconcileResult,
    RosterReconciler,
    list_templates,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "RosterEngineError",
    "NotFoundError",
    "InvalidTemplateKeyError",
    "InvalidArgumentError",
    "PersistenceError",
    "Settings",
    "get_settings",
    "configure_logging",
    "setup_logging",
    "get_logger",
    # Models
    "ParticipantKind",
    "SlotRole",
    "RosterUpdate",
    "SlotUpdate",
    # Storage
    "Database",
    "get_database",
    # Engine
    "PartyComposer",
    "PartyTemplate",
    "ReconcileResult",
    "RosterReconciler",
    "list_templates",
]
