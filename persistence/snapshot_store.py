"""
persistence.snapshot_store - Key-value slot holding the latest snapshot.

A put() replaces the previous value wholesale.  The file store writes
to a temporary file in the same directory and swaps it in with
os.replace, so an interrupted write leaves the old snapshot in place.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class SnapshotStoreError(Exception):
    """Reading or writing the durable snapshot failed."""


class SnapshotStore:
    """Interface: get(key) → bytes | None, put(key, data)."""

    def get(self, key: str) -> bytes | None:
        raise NotImplementedError

    def put(self, key: str, data: bytes) -> None:
        raise NotImplementedError


class MemorySnapshotStore(SnapshotStore):
    """Process-local store, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self.data: dict[str, bytes] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def put(self, key: str, data: bytes) -> None:
        self.data[key] = bytes(data)
        self.writes += 1


class FileSnapshotStore(SnapshotStore):
    """One file per key under ``directory``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise SnapshotStoreError(f"invalid snapshot key {key!r}")
        return self.directory / key

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SnapshotStoreError(f"cannot read {path}: {exc}") from exc

    def put(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self.directory,
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise SnapshotStoreError(f"cannot write {path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temp file %s", tmp_name)
        logger.debug("Snapshot %s written (%d bytes)", path, len(data))
