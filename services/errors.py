"""
services.errors - Errors surfaced to catalog callers.

Duplicate* and NotFound are user-correctable; the others are shown
verbatim.  QueryError is the engine's own class, re-exported here so
callers only need one import.
"""

from __future__ import annotations

from db.engine import QueryError

__all__ = [
    "CatalogError", "NotReady", "DuplicateName", "DuplicatePartNumber",
    "NotFound", "PersistenceError", "InitializationError", "QueryError",
]


class CatalogError(Exception):
    """Base class for catalog service errors."""


class NotReady(CatalogError):
    """The catalog has not finished loading, or failed to load."""


class DuplicateName(CatalogError):
    def __init__(self, name: str):
        super().__init__(f"A model named {name!r} already exists")
        self.name = name


class DuplicatePartNumber(CatalogError):
    def __init__(self, part_number: str):
        super().__init__(f"Part number {part_number!r} already exists")
        self.part_number = part_number


class NotFound(CatalogError):
    def __init__(self, kind: str, ident):
        super().__init__(f"{kind} {ident} not found")
        self.kind = kind
        self.ident = ident


class PersistenceError(CatalogError):
    """Writing the snapshot failed; the in-memory change was rolled back."""


class InitializationError(CatalogError):
    """Neither a persisted snapshot nor the seed could be loaded."""
