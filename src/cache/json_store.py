# src/cache/json_store.py — v2
"""JSON file-based cache store (default CACHE_BACKEND=json).

All entries live in one ``links.json`` object under CACHE_ROOT. Each put
rewrites the file through a temporary sibling so a crash never leaves a
truncated map behind.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from linkpreview.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

_FILENAME = "links.json"


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using a single JSON map."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)
        self._path = self._root / _FILENAME
        self._data: dict[str, str] | None = None

    async def load_all(self) -> dict[str, str]:
        """Read the whole map; a missing or corrupt file loads as empty."""
        return dict(self._read())

    async def put(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    async def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    async def clear(self) -> None:
        self._data = {}
        if self._path.exists():
            self._path.unlink()

    def _read(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        self._data = {}
        if not self._path.exists():
            return self._data
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read link cache %s: %s", self._path, e)
            return self._data
        if not isinstance(raw, dict):
            logger.warning("Ignoring link cache %s: not a JSON object", self._path)
            return self._data
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _write(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self._path)
