import pytest

from db import StoreEngine
from persistence import CsvSeedSource, MemorySnapshotStore, SeedSource, SeedUnavailable
from persistence.snapshot_store import SnapshotStoreError
from services import (
    CatalogService, CatalogState, InitializationError, NotReady,
    PersistenceError, SearchKind,
)
from tests.factories import SEED_CSV, StaticSeed, damaged_image


class BrokenSeed(SeedSource):
    def fetch(self) -> bytes:
        raise SeedUnavailable("offline")


class FailingWrites(MemorySnapshotStore):
    """Snapshot slot whose writes start failing once ``broken`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.broken = False

    def put(self, key, data):
        if self.broken:
            raise SnapshotStoreError("disk full")
        super().put(key, data)


class FailingReads(MemorySnapshotStore):
    def get(self, key):
        raise SnapshotStoreError("permission denied")


@pytest.fixture
def csv_seed(tmp_path):
    path = tmp_path / "seed.csv"
    path.write_text(SEED_CSV, encoding="utf-8")
    return CsvSeedSource(path)


def test_cold_start_loads_seed_and_persists_it(snapshots, csv_seed):
    service = CatalogService(snapshots, csv_seed, key="k").open()
    assert service.state is CatalogState.READY
    assert "k" in snapshots.data
    assert [m.name for m in service.search(SearchKind.MODEL)] == ["Toyota Corolla", "Peugeot 206"]
    service.close()


def test_warm_start_skips_seed(snapshots, empty_seed):
    first = CatalogService(snapshots, empty_seed, key="k").open()
    first.create_model("Corolla")
    first.close()

    second = CatalogService(snapshots, BrokenSeed(), key="k").open()
    assert [m.name for m in second.search(SearchKind.MODEL)] == ["Corolla"]
    assert empty_seed.fetches == 1
    second.close()


def test_corrupt_snapshot_falls_back_to_seed(empty_seed):
    snapshots = MemorySnapshotStore({"k": b"garbage" * 100})
    service = CatalogService(snapshots, empty_seed, key="k").open()
    assert service.ready
    assert empty_seed.fetches == 1
    # the corrupt snapshot was replaced by the seed image
    StoreEngine.reconstruct(snapshots.data["k"]).dispose()
    service.close()


def test_snapshot_with_damaged_pages_falls_back_to_seed(empty_seed):
    snapshots = MemorySnapshotStore({"k": damaged_image()})
    service = CatalogService(snapshots, empty_seed, key="k").open()
    assert service.state is CatalogState.READY
    assert empty_seed.fetches == 1
    assert service.search(SearchKind.PART, "PN-0001") == []
    StoreEngine.reconstruct(snapshots.data["k"]).dispose()
    service.close()


def test_unreadable_snapshot_store_uses_seed(empty_seed):
    service = CatalogService(FailingReads(), empty_seed, key="k").open()
    assert service.ready
    service.close()


def test_seed_failure_leaves_service_failed(snapshots):
    service = CatalogService(snapshots, BrokenSeed(), key="k")
    with pytest.raises(InitializationError) as excinfo:
        service.open()
    assert isinstance(excinfo.value.__cause__, SeedUnavailable)
    assert not isinstance(excinfo.value, PersistenceError)
    assert service.state is CatalogState.FAILED
    with pytest.raises(NotReady):
        service.search(SearchKind.MODEL, "")
    with pytest.raises(NotReady):
        service.create_model("Corolla")
    with pytest.raises(NotReady):
        service.open()


def test_corrupt_seed_fails():
    service = CatalogService(MemorySnapshotStore(), StaticSeed(b"junk" * 64), key="k")
    with pytest.raises(InitializationError):
        service.open()
    assert service.state is CatalogState.FAILED


def test_first_write_failure_fails(empty_seed):
    snapshots = FailingWrites()
    snapshots.broken = True
    service = CatalogService(snapshots, empty_seed, key="k")
    with pytest.raises(InitializationError):
        service.open()
    assert service.state is CatalogState.FAILED


def test_operations_before_open_raise_not_ready(snapshots, empty_seed):
    service = CatalogService(snapshots, empty_seed)
    assert service.state is CatalogState.UNINITIALIZED
    with pytest.raises(NotReady):
        service.links_for_model(1)
    with pytest.raises(NotReady):
        service.delete_part(1)


def test_persist_failure_rolls_back_mutation(empty_seed):
    snapshots = FailingWrites()
    service = CatalogService(snapshots, empty_seed, key="k").open()
    service.create_model("Corolla")
    saved = snapshots.data["k"]

    snapshots.broken = True
    with pytest.raises(PersistenceError):
        service.create_model("Civic")
    with pytest.raises(PersistenceError):
        service.delete_model(1)

    assert [m.name for m in service.search(SearchKind.MODEL)] == ["Corolla"]
    assert snapshots.data["k"] == saved

    snapshots.broken = False
    service.create_model("Civic")
    assert len(service.search(SearchKind.MODEL)) == 2
    service.close()


def test_successful_mutation_survives_restart(snapshots, empty_seed):
    with CatalogService(snapshots, empty_seed, key="k") as service:
        part_id = service.create_part("BP-1001", "Brake Pad")
        service.create_model("Corolla", {part_id})
        links = service.links_for_part(part_id)

    with CatalogService(snapshots, BrokenSeed(), key="k") as service:
        assert service.links_for_part(part_id) == links
        assert [p.part_number for p in service.search(SearchKind.PART)] == ["BP-1001"]


def test_close_returns_to_uninitialized(catalog):
    catalog.close()
    assert catalog.state is CatalogState.UNINITIALIZED
    with pytest.raises(NotReady):
        catalog.search(SearchKind.PART)
