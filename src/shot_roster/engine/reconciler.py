"""Roster reconciliation for fights.

A fight's roster is a multiset of shots per participant kind: the same
character may appear several times, each appearance its own shot with its
own initiative. Callers send the desired list of ids (duplicates meaning
multiple shots) and the reconciler turns the stored multiset into exactly
that, creating missing shots and deleting surplus ones.

Surplus shots are removed from the newest end of each participant's group,
so the oldest shots (and whatever initiative was recorded on them) survive.
"""

from __future__ import annotations

import dataclasses
import sqlite3
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from shot_roster.core.exceptions import InvalidArgumentError, NotFoundError
from shot_roster.core.logging import get_logger
from shot_roster.models.enums import ParticipantKind
from shot_roster.models.requests import RosterUpdate, parse_desired_ids, parse_request
from shot_roster.storage.database import Database, get_database
from shot_roster.storage.directory import Directory
from shot_roster.storage.records import ShotRecord
from shot_roster.storage.roster_store import RosterStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of reconciling one participant kind.

    Attributes:
        created: Number of shots inserted.
        deleted: Number of shots removed.
    """

    created: int = 0
    deleted: int = 0

    @property
    def changed(self) -> bool:
        """Whether the reconciliation wrote anything."""
        return bool(self.created or self.deleted)


@dataclass(frozen=True)
class ReconcilePlan:
    """Writes needed to bring one kind's shots to the desired multiset.

    Attributes:
        to_create: Participant ids to insert, one entry per new shot.
        to_delete: Ids of the shots to remove.
    """

    to_create: tuple[str, ...]
    to_delete: tuple[str, ...]


def plan_reconciliation(
    existing: Mapping[str, Sequence[ShotRecord]],
    desired_ids: Iterable[str],
) -> ReconcilePlan:
    """Compare stored shots against the desired ids.

    Args:
        existing: Stored shots per participant id, each group oldest first.
        desired_ids: Desired participant ids; repeats mean extra shots.

    Returns:
        The shots to create and delete. Deletions take each group's newest
        shots, so for every participant the first ``want`` shots are kept.
    """
    wanted = Counter(desired_ids)
    to_create: list[str] = []
    to_delete: list[str] = []

    for participant_id in dict.fromkeys([*wanted, *existing]):
        want = wanted.get(participant_id, 0)
        shots = existing.get(participant_id, ())
        have = len(shots)
        if want > have:
            to_create.extend([participant_id] * (want - have))
        elif want < have:
            to_delete.extend(shot.id for shot in shots[want:])

    return ReconcilePlan(to_create=tuple(to_create), to_delete=tuple(to_delete))


# =============================================================================
# Reconciler
# =============================================================================


class RosterReconciler:
    """Keeps fight rosters in line with the desired participant lists.

    Each public call runs in its own write transaction, so two
    reconciliations of the same fight never interleave and a failure leaves
    the roster as it was.

    Example:
        >>> reconciler = RosterReconciler(Database("roster.db"))
        >>> reconciler.reconcile(fight_id, "character", ["c1", "c1", "c2"])
        ReconcileResult(created=3, deleted=0)
    """

    def __init__(self, database: Database | None = None) -> None:
        """Initialize the reconciler.

        Args:
            database: Backing database; defaults to the global instance.
        """
        self.database = database or get_database()

    def reconcile(self, fight_id: str, kind: ParticipantKind | str, desired_ids: Any) -> ReconcileResult:
        """Make a fight's shots of one kind match the desired ids.

        Args:
            fight_id: Fight to reconcile.
            kind: Participant kind, as enum or string.
            desired_ids: Desired participant ids, duplicates allowed.

        Returns:
            How many shots were created and deleted.

        Raises:
            InvalidArgumentError: If the kind or the id list is malformed.
            NotFoundError: If the fight does not exist.
            PersistenceError: If the database write fails.
        """
        participant_kind = ParticipantKind.parse(kind)
        ids = parse_desired_ids(desired_ids, participant_kind)

        with self.database.transaction("reconcile") as conn:
            Directory(conn).require_fight(fight_id)
            result = self._reconcile_kind(conn, fight_id, participant_kind, ids)

        logger.info(
            "Roster reconciled",
            fight_id=fight_id,
            kind=str(participant_kind),
            created=result.created,
            deleted=result.deleted,
        )
        return result

    def sync_roster(
        self,
        fight_id: str,
        update: RosterUpdate | Mapping[str, Any],
    ) -> dict[ParticipantKind, ReconcileResult]:
        """Reconcile every kind present in a roster update, atomically.

        Kinds missing from the update (or given as null) keep their shots.

        Args:
            fight_id: Fight to reconcile.
            update: ``character_ids`` and/or ``vehicle_ids`` lists.

        Returns:
            Result per reconciled kind.

        Raises:
            InvalidArgumentError: If the update is malformed.
            NotFoundError: If the fight does not exist.
            PersistenceError: If the database write fails.
        """
        request = parse_request(RosterUpdate, update)
        desired = request.desired_by_kind()

        with self.database.transaction("sync_roster") as conn:
            Directory(conn).require_fight(fight_id)
            results = {
                kind: self._reconcile_kind(conn, fight_id, kind, ids)
                for kind, ids in desired.items()
            }

        logger.info(
            "Roster synced",
            fight_id=fight_id,
            kinds=[str(kind) for kind in results],
            created=sum(r.created for r in results.values()),
            deleted=sum(r.deleted for r in results.values()),
        )
        return results

    def append_entries(
        self,
        conn: sqlite3.Connection,
        fight_id: str,
        kind: ParticipantKind,
        participant_ids: Iterable[str],
    ) -> list[ShotRecord]:
        """Insert one shot per id inside the caller's transaction.

        Never deletes. Used by reconciliation and by adding a party to a
        fight; the caller has already checked that the fight exists.

        Args:
            conn: Connection holding the write transaction.
            fight_id: Owning fight.
            kind: Kind of every id in the batch.
            participant_ids: Ids to add, one shot each.

        Returns:
            The inserted shots, in input order.
        """
        store = RosterStore(conn)
        return [store.insert(fight_id, kind, participant_id) for participant_id in participant_ids]

    def list_roster(self, fight_id: str, kind: ParticipantKind | str | None = None) -> list[ShotRecord]:
        """Return a fight's shots, oldest first.

        Raises:
            InvalidArgumentError: If the kind is malformed.
            NotFoundError: If the fight does not exist.
        """
        participant_kind = ParticipantKind.parse(kind) if kind is not None else None
        with self.database.connection("list_roster") as conn:
            Directory(conn).require_fight(fight_id)
            return RosterStore(conn).list_for_fight(fight_id, participant_kind)

    def set_initiative(self, fight_id: str, shot_id: str, value: int | None) -> ShotRecord:
        """Record a shot's initiative.

        Args:
            fight_id: Fight the shot must belong to.
            shot_id: Shot to update.
            value: Initiative, or None to clear it.

        Returns:
            The updated shot.

        Raises:
            InvalidArgumentError: If the value is not an integer.
            NotFoundError: If the shot is not part of this fight.
        """
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise InvalidArgumentError(
                "Initiative must be an integer",
                field_name="initiative",
                invalid_value=value,
            )

        with self.database.transaction("set_initiative") as conn:
            store = RosterStore(conn)
            shot = self._require_shot(store, fight_id, shot_id)
            store.set_initiative(shot.id, value)

        logger.debug("Initiative set", fight_id=fight_id, shot_id=shot_id, initiative=value)
        return dataclasses.replace(shot, initiative=value)

    def assign_driver(self, fight_id: str, driver_shot_id: str, vehicle_shot_id: str) -> None:
        """Link a character shot as the driver of a vehicle shot.

        The link is cleared automatically when either shot is deleted.

        Raises:
            InvalidArgumentError: If the shots are not a character and a vehicle.
            NotFoundError: If either shot is not part of this fight.
        """
        with self.database.transaction("assign_driver") as conn:
            store = RosterStore(conn)
            driver = self._require_shot(store, fight_id, driver_shot_id)
            vehicle = self._require_shot(store, fight_id, vehicle_shot_id)
            if driver.kind is not ParticipantKind.CHARACTER:
                raise InvalidArgumentError(
                    "Driver must be a character shot",
                    field_name="driver_shot_id",
                    invalid_value=driver_shot_id,
                )
            if vehicle.kind is not ParticipantKind.VEHICLE:
                raise InvalidArgumentError(
                    "Driven shot must be a vehicle shot",
                    field_name="vehicle_shot_id",
                    invalid_value=vehicle_shot_id,
                )
            store.link_driver(driver.id, vehicle.id)

        logger.debug(
            "Driver assigned",
            fight_id=fight_id,
            driver_shot_id=driver_shot_id,
            vehicle_shot_id=vehicle_shot_id,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reconcile_kind(
        self,
        conn: sqlite3.Connection,
        fight_id: str,
        kind: ParticipantKind,
        desired_ids: Sequence[str],
    ) -> ReconcileResult:
        store = RosterStore(conn)
        plan = plan_reconciliation(store.group_by_participant(fight_id, kind), desired_ids)

        deleted = store.delete(plan.to_delete)
        created = self.append_entries(conn, fight_id, kind, plan.to_create)

        logger.debug(
            "Reconciliation plan applied",
            fight_id=fight_id,
            kind=str(kind),
            desired=len(desired_ids),
            created=len(created),
            deleted=deleted,
        )
        return ReconcileResult(created=len(created), deleted=deleted)

    @staticmethod
    def _require_shot(store: RosterStore, fight_id: str, shot_id: str) -> ShotRecord:
        shot = store.get(fight_id, shot_id)
        if shot is None:
            raise NotFoundError("shot", shot_id)
        return shot


__all__ = [
    "ReconcileResult",
    "ReconcilePlan",
    "plan_reconciliation",
    "RosterReconciler",
]
