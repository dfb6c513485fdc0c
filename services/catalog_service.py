"""
services.catalog_service - Catalog operations and snapshot lifecycle.

CatalogService is the sole owner of the StoreEngine and the only writer
of the persisted snapshot.  Lifecycle:

    UNINITIALIZED ──open()──► LOADING ──► READY
                                      └─► FAILED

Loading prefers the persisted snapshot; when it is missing or corrupt
the seed snapshot is fetched, loaded, and written back so later
sessions start from the local copy.

Every mutation runs in one transaction and is then checkpointed: the
whole database is serialized and replaces the persisted snapshot before
the call returns.  If that write fails the in-memory database is rolled
back to the image taken before the mutation and PersistenceError is
raised, so a successful return always means the change is durable.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Iterable, TypeVar

import config
from db.engine import CorruptSnapshotError, QueryError, StoreEngine, StoreError
from db.models import CarModel, CarPart
from import_engine import ImportReport, clear_catalog, run_import
from persistence.seed_source import SeedSource, SeedUnavailable
from persistence.snapshot_store import SnapshotStore, SnapshotStoreError
from services.errors import InitializationError, NotReady, PersistenceError
from services.link_service import LinkService
from services.search_service import ModelLink, PartLink, SearchKind, SearchService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class CatalogService:

    def __init__(
        self,
        snapshots: SnapshotStore,
        seed: SeedSource,
        key: str = config.SNAPSHOT_KEY,
    ):
        self._snapshots = snapshots
        self._seed = seed
        self._key = key
        self._store: StoreEngine | None = None
        self.state = CatalogState.UNINITIALIZED
        self.error: Exception | None = None

    # ── Lifecycle ──────────────────────────────────────────────────────

    def open(self) -> "CatalogService":
        """Load the catalog.  Raises InitializationError on failure."""
        if self.state is CatalogState.READY:
            return self
        if self.state is CatalogState.FAILED:
            raise NotReady(f"catalog failed to load: {self.error}")

        self.state = CatalogState.LOADING
        try:
            self._store = self._load()
        except (SnapshotStoreError, SeedUnavailable, StoreError) as exc:
            self.state = CatalogState.FAILED
            self.error = exc
            logger.error("Catalog load failed: %s", exc)
            raise InitializationError(str(exc)) from exc

        self.state = CatalogState.READY
        return self

    def close(self) -> None:
        if self._store is not None:
            self._store.dispose()
            self._store = None
        self.state = CatalogState.UNINITIALIZED
        self.error = None

    def __enter__(self) -> "CatalogService":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def ready(self) -> bool:
        return self.state is CatalogState.READY

    def _load(self) -> StoreEngine:
        try:
            data = self._snapshots.get(self._key)
        except SnapshotStoreError as exc:
            logger.warning("Cannot read persisted snapshot (%s); using seed", exc)
            data = None

        if data is not None:
            try:
                store = StoreEngine.reconstruct(data)
            except CorruptSnapshotError as exc:
                logger.warning("Persisted snapshot is corrupt (%s); using seed", exc)
            else:
                logger.info("Catalog loaded from persisted snapshot (%d bytes)", len(data))
                return store

        store = StoreEngine.reconstruct(self._seed.fetch())
        try:
            self._snapshots.put(self._key, store.serialize())
        except (SnapshotStoreError, QueryError):
            store.dispose()
            raise
        logger.info("Catalog loaded from seed %r and persisted", self._seed)
        return store

    # ── Internal ───────────────────────────────────────────────────────

    def _ready_store(self) -> StoreEngine:
        if self.state is not CatalogState.READY or self._store is None:
            raise NotReady(f"catalog is {self.state.value}")
        return self._store

    def _read(self, work: Callable[..., T]) -> T:
        with self._ready_store().transaction() as session:
            return work(session)

    def _mutate(self, work: Callable[..., T]) -> T:
        store = self._ready_store()
        before = store.serialize()
        with store.transaction() as session:
            result = work(session)
        self._checkpoint(before)
        return result

    def _checkpoint(self, before: bytes) -> None:
        try:
            self._snapshots.put(self._key, self._store.serialize())
        except (SnapshotStoreError, QueryError) as exc:
            logger.error("Snapshot write failed (%s); rolling back", exc)
            restored = StoreEngine.reconstruct(before)
            self._store.dispose()
            self._store = restored
            raise PersistenceError(f"change not saved: {exc}") from exc

    # ── Queries ────────────────────────────────────────────────────────

    def search(self, kind: SearchKind | str, term: str = "") -> list:
        return self._read(lambda s: SearchService.search(s, kind, term))

    def links_for_model(self, model_id: int) -> list[PartLink]:
        return self._read(lambda s: SearchService.links_for_model(s, model_id))

    def links_for_part(self, part_id: int) -> list[ModelLink]:
        return self._read(lambda s: SearchService.links_for_part(s, part_id))

    def get_model(self, model_id: int) -> CarModel:
        return self._read(lambda s: LinkService.get_model(s, model_id))

    def get_part(self, part_id: int) -> CarPart:
        return self._read(lambda s: LinkService.get_part(s, part_id))

    # ── Mutations ──────────────────────────────────────────────────────

    def create_model(self, name: str, part_ids: Iterable[int] = ()) -> int:
        part_ids = set(part_ids)
        return self._mutate(lambda s: LinkService.create_model(s, name, part_ids))

    def create_part(self, part_number: str, name: str,
                    model_ids: Iterable[int] = ()) -> int:
        model_ids = set(model_ids)
        return self._mutate(
            lambda s: LinkService.create_part(s, part_number, name, model_ids)
        )

    def delete_model(self, model_id: int) -> None:
        self._mutate(lambda s: LinkService.delete_model(s, model_id))

    def delete_part(self, part_id: int) -> None:
        self._mutate(lambda s: LinkService.delete_part(s, part_id))

    def import_rows(self, *contents: str | bytes) -> ImportReport:
        """Import one or more CSV blobs as a single checkpointed change."""
        def work(session):
            report = ImportReport()
            for content in contents:
                report.merge(run_import(session, content))
            return report
        return self._mutate(work)

    def clear(self) -> dict:
        return self._mutate(clear_catalog)

