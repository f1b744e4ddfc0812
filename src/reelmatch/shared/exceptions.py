"""Hierarchical exception types for reelmatch.

The parsing and matching engine never raises for string input; these types
exist for the request boundary and the profile store.
"""

from __future__ import annotations


class ReelmatchError(Exception):
    """Base exception for all reelmatch errors."""


# ── Request boundary ────────────────────────────────────────────


class ValidationError(ReelmatchError):
    """Caller supplied a missing or blank field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(ReelmatchError):
    """A referenced entity (e.g. a quality profile) does not exist."""


# ── Infrastructure ──────────────────────────────────────────────


class DatabaseError(ReelmatchError):
    """Failed to communicate with PostgreSQL."""


class ProfileDecodeError(DatabaseError):
    """Stored profile rules could not be decoded."""
