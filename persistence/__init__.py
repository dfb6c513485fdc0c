"""
persistence - Where snapshots come from and where they are kept.

Public API:
    FileSnapshotStore / MemorySnapshotStore  → durable key-value slot
    FileSeedSource / CsvSeedSource / HttpSeedSource → seed snapshot
    seed_source_from_config()                → source picked from config
"""

from persistence.snapshot_store import (                          # noqa: F401
    SnapshotStore, FileSnapshotStore, MemorySnapshotStore, SnapshotStoreError,
)
from persistence.seed_source import (                             # noqa: F401
    SeedSource, FileSeedSource, CsvSeedSource, HttpSeedSource, SeedUnavailable,
    seed_source_from_config,
)
