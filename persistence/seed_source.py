"""
persistence.seed_source - Fetch the bundled seed snapshot.

The seed is only read on a cold start (no persisted snapshot yet).
Fetch failures are reported once as SeedUnavailable; there is no retry.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

import config
from db.engine import StoreEngine
from import_engine import ImportReport, run_import

logger = logging.getLogger(__name__)


class SeedUnavailable(Exception):
    """The seed snapshot could not be obtained."""


class SeedSource:
    """Interface: fetch() → bytes."""

    def fetch(self) -> bytes:
        raise NotImplementedError


class FileSeedSource(SeedSource):

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def fetch(self) -> bytes:
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise SeedUnavailable(f"cannot read seed {self.path}: {exc}") from exc
        logger.info("Seed read from %s (%d bytes)", self.path, len(data))
        return data

    def __repr__(self) -> str:
        return f"FileSeedSource({str(self.path)!r})"


class CsvSeedSource(SeedSource):
    """
    Builds the seed snapshot by importing CSV sheets into an empty store.
    The import report of the last fetch is kept on ``report``.
    """

    def __init__(self, *paths: str | Path):
        self.paths = [Path(p) for p in paths]
        self.report: ImportReport | None = None

    def fetch(self) -> bytes:
        try:
            contents = [p.read_bytes() for p in self.paths]
        except OSError as exc:
            raise SeedUnavailable(f"cannot read seed sheet: {exc}") from exc

        report = ImportReport()
        store = StoreEngine.create_empty()
        try:
            with store.transaction() as session:
                for content in contents:
                    report.merge(run_import(session, content))
            data = store.serialize()
        finally:
            store.dispose()

        self.report = report
        if report.errors:
            logger.warning("Seed sheets: %d rows skipped", report.skipped)
        logger.info("Seed built from %d sheet(s): %d parts", len(self.paths), report.imported)
        return data

    def __repr__(self) -> str:
        return f"CsvSeedSource({', '.join(repr(str(p)) for p in self.paths)})"


class HttpSeedSource(SeedSource):

    def __init__(self, url: str, timeout: float = config.LOAD_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def fetch(self) -> bytes:
        headers = {"User-Agent": "CarParts/1.0"}
        try:
            response = requests.get(self.url, headers=headers,
                                    timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SeedUnavailable(f"cannot download seed {self.url}: {exc}") from exc
        logger.info("Seed downloaded from %s (%d bytes)", self.url, len(response.content))
        return response.content

    def __repr__(self) -> str:
        return f"HttpSeedSource({self.url!r})"


def seed_source_from_config() -> SeedSource:
    """HTTP source when CARPARTS_SEED_URL is set, otherwise the local file."""
    if config.SEED_URL:
        return HttpSeedSource(config.SEED_URL, timeout=config.LOAD_TIMEOUT)
    if config.SEED_PATH.suffix.lower() == ".csv":
        return CsvSeedSource(config.SEED_PATH)
    return FileSeedSource(config.SEED_PATH)
