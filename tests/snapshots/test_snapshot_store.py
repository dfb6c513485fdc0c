import os

import pytest

from persistence import FileSnapshotStore, MemorySnapshotStore, SnapshotStoreError


def test_file_store_missing_key_returns_none(tmp_path):
    assert FileSnapshotStore(tmp_path / "data").get("carparts.db") is None


def test_file_store_put_replaces_value(tmp_path):
    store = FileSnapshotStore(tmp_path / "data")
    store.put("carparts.db", b"one")
    store.put("carparts.db", b"two")
    assert store.get("carparts.db") == b"two"
    # no temp files left behind
    assert os.listdir(tmp_path / "data") == ["carparts.db"]


def test_file_store_failed_write_keeps_previous(tmp_path, monkeypatch):
    store = FileSnapshotStore(tmp_path)
    store.put("carparts.db", b"old")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(SnapshotStoreError):
        store.put("carparts.db", b"new")
    assert store.get("carparts.db") == b"old"
    assert os.listdir(tmp_path) == ["carparts.db"]


@pytest.mark.parametrize("key", ["../escape.db", "a/b", ""])
def test_file_store_rejects_unsafe_keys(tmp_path, key):
    with pytest.raises(SnapshotStoreError):
        FileSnapshotStore(tmp_path).put(key, b"x")


def test_memory_store_counts_writes():
    store = MemorySnapshotStore()
    store.put("k", b"1")
    store.put("k", b"2")
    assert (store.get("k"), store.writes) == (b"2", 2)
