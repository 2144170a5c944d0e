# src/cache/memory_store.py — v1
"""Non-persistent store (CACHE_BACKEND=memory): resolutions last for the process only."""

from __future__ import annotations

from linkpreview.cache.base_cache_store import BaseCacheStore


class MemoryCacheStore(BaseCacheStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def load_all(self) -> dict[str, str]:
        return dict(self._data)

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()
