"""
db - Store engine layer.

Public API:
    StoreEngine.create_empty()  → fresh database with the catalog schema
    StoreEngine.reconstruct(b)  → database rebuilt from a snapshot
    CarModel, CarPart, CarPartLink → ORM models
"""

from db.engine import (                                         # noqa: F401
    StoreEngine, StoreError, QueryError, CorruptSnapshotError,
)
from db.models import Base, CarModel, CarPart, CarPartLink      # noqa: F401
