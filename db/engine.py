"""
db.engine - In-memory store engine and its snapshot format.

One StoreEngine owns one in-memory SQLite database behind a single
shared connection.  The database can be dumped to a complete SQLite
image (serialize) and rebuilt from one (reconstruct); that image is
the snapshot format used for persistence and for the seed asset.

The engine knows nothing about where snapshots are kept or about
catalog rules.  Those live in services.catalog_service.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator, Sequence

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from db.models import Base


class StoreError(Exception):
    """Base class for store engine failures."""


class QueryError(StoreError):
    """A statement failed: malformed SQL or a constraint violation."""


class CorruptSnapshotError(StoreError):
    """Snapshot bytes are not a SQLite image of the catalog schema."""


class StoreEngine:
    """
    Narrow query executor over one owned in-memory database.

    Build instances with create_empty() or reconstruct(); the bare
    constructor yields a database without any tables.
    """

    def __init__(self):
        self._engine = create_engine(
            "sqlite://",
            echo=False,
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(self._engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _rec):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)

    # ── Construction ───────────────────────────────────────────────────

    @classmethod
    def create_empty(cls) -> "StoreEngine":
        """Fresh database with the catalog tables and indexes."""
        store = cls()
        Base.metadata.create_all(store._engine)
        return store

    @classmethod
    def reconstruct(cls, data: bytes) -> "StoreEngine":
        """
        Build a fresh database from bytes produced by serialize().

        Raises CorruptSnapshotError when the bytes are not a SQLite
        image, do not carry the expected tables and columns, or fail
        SQLite's quick_check.
        """
        if not data:
            raise CorruptSnapshotError("snapshot is empty")

        store = cls()
        try:
            raw = store._engine.raw_connection()
            try:
                raw.driver_connection.deserialize(bytes(data))
            finally:
                raw.close()
        except (sqlite3.DatabaseError, OverflowError) as exc:
            store.dispose()
            raise CorruptSnapshotError(f"cannot load snapshot: {exc}") from exc

        try:
            store._check_schema()
        except CorruptSnapshotError:
            store.dispose()
            raise
        return store

    def _check_schema(self) -> None:
        try:
            insp = inspect(self._engine)
            present = set(insp.get_table_names())
            for table in Base.metadata.sorted_tables:
                if table.name not in present:
                    raise CorruptSnapshotError(f"missing table {table.name}")
                cols = {c["name"] for c in insp.get_columns(table.name)}
                missing = {c.name for c in table.columns} - cols
                if missing:
                    raise CorruptSnapshotError(
                        f"table {table.name} lacks columns {sorted(missing)}"
                    )
            with self._engine.connect() as conn:
                problems = [r[0] for r in conn.exec_driver_sql("PRAGMA quick_check")]
        except SQLAlchemyError as exc:
            # "file is not a database" surfaces on first read
            raise CorruptSnapshotError(f"unreadable snapshot: {exc}") from exc
        if problems != ["ok"]:
            raise CorruptSnapshotError(f"damaged snapshot: {'; '.join(problems[:3])}")

    # ── Execution ──────────────────────────────────────────────────────

    def execute(self, sql, params: Sequence | dict | None = None) -> list:
        """
        Run one statement in its own transaction.

        ``sql`` is either SQL text with positional ``?`` placeholders
        or a SQLAlchemy executable.  Returns the result rows for reads
        and an empty list for writes.
        """
        try:
            with self._engine.begin() as conn:
                if isinstance(sql, str):
                    result = conn.exec_driver_sql(sql, tuple(params or ()))
                elif params:
                    result = conn.execute(sql, params)
                else:
                    result = conn.execute(sql)
                return list(result.all()) if result.returns_rows else []
        except SQLAlchemyError as exc:
            raise QueryError(str(exc)) from exc

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Yield a Session whose work commits as one unit.

        Any exception inside the block rolls everything back; engine
        level failures are re-raised as QueryError.
        """
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise QueryError(str(exc)) from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    # ── Snapshot ───────────────────────────────────────────────────────

    def serialize(self) -> bytes:
        """Complete, self-contained SQLite image of the current contents."""
        raw = self._engine.raw_connection()
        try:
            return bytes(raw.driver_connection.serialize())
        except sqlite3.Error as exc:
            raise QueryError(f"serialize failed: {exc}") from exc
        finally:
            raw.close()

    def dispose(self) -> None:
        self._engine.dispose()
