"""Engine module for roster reconciliation and party composition.

Submodules:
    templates: Immutable catalog of party templates
    reconciler: Multiset reconciliation of fight rosters
    composer: Party slot CRUD, template application and add-party

Example:
    >>> from shot_roster.engine import PartyComposer, RosterReconciler
    >>>
    >>> reconciler = RosterReconciler(database)
    >>> reconciler.reconcile(fight_id, "character", ["c1", "c1", "c2"])
    >>>
    >>> composer = PartyComposer(database, reconciler)
    >>> composer.apply_template(party_id, "boss_fight")
    >>> composer.add_party_to_fight(fight_id, party_id)
"""

from __future__ import annotations

# =============================================================================
# Templates
# =============================================================================
from shot_roster.engine.templates import (
    PartyTemplate,
    SlotBlueprint,
    get_template,
    is_valid_template,
    list_templates,
    template_keys,
)

# =============================================================================
# Reconciliation
# =============================================================================
from shot_roster.engine.reconciler import (
    ReconcilePlan,
    ReconcileResult,
    RosterReconciler,
    plan_reconciliation,
)

# =============================================================================
# Composition
# =============================================================================
from shot_roster.engine.composer import PartyComposer


__all__ = [
    # Templates
    "PartyTemplate",
    "SlotBlueprint",
    "get_template",
    "is_valid_template",
    "list_templates",
    "template_keys",
    # Reconciliation
    "ReconcilePlan",
    "ReconcileResult",
    "RosterReconciler",
    "plan_reconciliation",
    # Composition
    "PartyComposer",
]
