# src/cache/sqlite_store.py — v2
"""SQLite-based key-value store (CACHE_BACKEND=sqlite).

Backed by the stdlib sqlite3 module. Several namespaces can
share one database file.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from sentencekit.cache.base_cache_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_entries (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (namespace, key)
);
"""


class SqliteKeyValueStore(BaseKeyValueStore):
    """SQLite-backed namespace."""

    def __init__(self, db_path: Path | str, namespace: str) -> None:
        super().__init__(namespace)
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> str | None:
        cursor = self._conn.execute(
            "SELECT value FROM kv_entries WHERE namespace = ? AND key = ?",
            (self._namespace, key),
        )
        row = cursor.fetchone()
        return None if row is None else row[0]

    async def put(self, key: str, value: str) -> None:
        """Store a value (upsert)."""
        self._conn.execute(
            """INSERT OR REPLACE INTO kv_entries (namespace, key, value, updated_at)
               VALUES (?, ?, ?, CURRENT_TIMESTAMP)""",
            (self._namespace, key, value),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute(
            "DELETE FROM kv_entries WHERE namespace = ? AND key = ?",
            (self._namespace, key),
        )
        self._conn.commit()

    async def keys(self) -> list[str]:
        cursor = self._conn.execute(
            "SELECT key FROM kv_entries WHERE namespace = ? ORDER BY key",
            (self._namespace,),
        )
        return [row[0] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
