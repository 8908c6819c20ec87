"""Storage module for shot-roster persistence.

Provides SQLite-based storage for:
- Fights and parties (lookups used by the engine)
- Shots (fight roster entries)
- Party slots (ordered role slots)
"""

from shot_roster.storage.database import Database, get_database, utc_timestamp
from shot_roster.storage.directory import Directory
from shot_roster.storage.records import FightRecord, PartyRecord, ShotRecord, SlotRecord
from shot_roster.storage.roster_store import RosterStore
from shot_roster.storage.slot_store import SlotStore

__all__ = [
    "Database",
    "get_database",
    "utc_timestamp",
    "Directory",
    "FightRecord",
    "PartyRecord",
    "ShotRecord",
    "SlotRecord",
    "RosterStore",
    "SlotStore",
]
