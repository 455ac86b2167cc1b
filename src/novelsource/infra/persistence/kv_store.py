"""
Key-value stores backing the chapter content cache.

Two stores are shipped: `MemoryKVStore`, a process-local dict, and
`SqliteKVStore`, a single-table SQLite file whose blocking calls are run
in a worker thread so the event loop is never stalled.
"""

from __future__ import annotations

__all__ = ["KVStoreProtocol", "MemoryKVStore", "SqliteKVStore"]

import asyncio
import contextlib
import sqlite3
import threading
import types
from pathlib import Path
from typing import Protocol, Self, runtime_checkable

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
  key        TEXT NOT NULL PRIMARY KEY,
  value      TEXT NOT NULL,
  updated_at REAL NOT NULL DEFAULT (julianday('now'))
);
"""


@runtime_checkable
class KVStoreProtocol(Protocol):
    """Asynchronous string-to-string store."""

    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class MemoryKVStore:
    """In-memory store, mostly useful for previews and tests."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqliteKVStore:
    """SQLite-backed store.

    The connection is opened lazily on first use (or explicitly with
    :meth:`connect`) and shared by the worker threads; a lock serializes
    access to it.
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Args:
            db_path: Path to the SQLite file. Parent directories are created.
        """
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def connect(self) -> None:
        """Open the SQLite connection and create the table if needed."""
        with self._lock:
            self._connect_locked()

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is None:
                return
            with contextlib.suppress(sqlite3.Error):
                self._conn.close()
            self._conn = None

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set_sync, key, value)

    def _get_sync(self, key: str) -> str | None:
        with self._lock:
            conn = self._connect_locked()
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def _set_sync(self, key: str, value: str) -> None:
        with self._lock:
            conn = self._connect_locked()
            conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=julianday('now')
                """,
                (key, value),
            )
            conn.commit()

    def _connect_locked(self) -> sqlite3.Connection:
        if self._conn is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.executescript(_CREATE_TABLE_SQL)
            self._conn.commit()
        return self._conn

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<SqliteKVStore path='{self._db_path}'>"
