"""Application-wide constants for the shot-roster engine."""

from __future__ import annotations

# =============================================================================
# Slot Constants
# =============================================================================

FIRST_SLOT_POSITION = 0
"""Position of the first slot in a party; positions run 0..n-1."""

ROLE_MAX_LENGTH = 255
"""Longest role tag accepted on a slot."""

# =============================================================================
# Storage Constants
# =============================================================================

SQLITE_LOCK_MESSAGES = ("database is locked", "database is busy")
"""Fragments of sqlite3.OperationalError messages that mean "retry later"."""
