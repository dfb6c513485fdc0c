import pytest

from db import StoreEngine
from persistence import MemorySnapshotStore
from services import CatalogService
from tests.factories import ALL_FACTORIES, StaticSeed


@pytest.fixture
def store():
    """Fresh empty store engine."""
    engine = StoreEngine.create_empty()
    yield engine
    engine.dispose()


@pytest.fixture
def session(store):
    """Session inside one committed transaction, bound to the factories."""
    with store.transaction() as s:
        for f in ALL_FACTORIES:
            f._meta.sqlalchemy_session = s
        yield s
    for f in ALL_FACTORIES:
        f._meta.sqlalchemy_session = None


@pytest.fixture
def empty_seed():
    engine = StoreEngine.create_empty()
    try:
        return StaticSeed(engine.serialize())
    finally:
        engine.dispose()


@pytest.fixture
def snapshots():
    return MemorySnapshotStore()


@pytest.fixture
def catalog(snapshots, empty_seed):
    """Ready catalog over an empty seed and an in-memory snapshot slot."""
    service = CatalogService(snapshots, empty_seed, key="test.db").open()
    yield service
    service.close()


@pytest.fixture
def corolla_catalog(catalog):
    """Model 1 'Corolla' and part 1 'BP-1001' linked as secondary."""
    part_id = catalog.create_part("BP-1001", "Brake Pad")
    model_id = catalog.create_model("Corolla", {part_id})
    assert (model_id, part_id) == (1, 1)
    return catalog
