# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from linkpreview.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS link_images (
    fingerprint TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        # The cache may be loaded and written from different worker threads.
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def load_all(self) -> dict[str, str]:
        cursor = self._conn.execute("SELECT fingerprint, value FROM link_images")
        return {row[0]: row[1] for row in cursor.fetchall()}

    async def put(self, key: str, value: str) -> None:
        """Store a value (upsert)."""
        self._conn.execute(
            """INSERT INTO link_images (fingerprint, value) VALUES (?, ?)
               ON CONFLICT(fingerprint) DO UPDATE
               SET value = excluded.value, updated_at = CURRENT_TIMESTAMP""",
            (key, value),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM link_images WHERE fingerprint = ?", (key,))
        self._conn.commit()

    async def clear(self) -> None:
        self._conn.execute("DELETE FROM link_images")
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
