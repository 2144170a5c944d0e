# src/cache/resolution_cache.py — v2
"""Process-lifetime map of URL fingerprint -> CacheEntry.

The in-memory map is the authoritative runtime copy. Every change is written
through to the durable store; the store is only read once, by ``load()``,
which is meant to run as a background task started with ``start_loading()``.

Ordering guarantees:
  - ``lookup`` never blocks and never waits for ``load``. Before the load
    finishes a key that only exists on disk reads as a miss.
  - Values written at runtime before the load finished win over the loaded
    ones, so a load can never revert a fresher entry.
  - Store writes are serialized and always persist the *current* in-memory
    value for the key, so the store converges on the last put.
"""

from __future__ import annotations

import asyncio
import logging
import threading

from linkpreview.cache.base_cache_store import BaseCacheStore
from linkpreview.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class ResolutionCache:
    """Shared resolution cache injected into the coordinator and controllers."""

    def __init__(self, store: BaseCacheStore) -> None:
        self._store = store
        self._entries: dict[str, CacheEntry] = {}
        self._touched: set[str] = set()
        self._lock = threading.Lock()
        self._loaded = False
        self._load_task: asyncio.Task[dict[str, CacheEntry]] | None = None
        self._write_lock = asyncio.Lock()
        self._pending_writes: set[asyncio.Task[None]] = set()

    # --- Loading ---

    def start_loading(self) -> asyncio.Task[dict[str, CacheEntry]]:
        """Schedule ``load()`` on the running loop. Idempotent."""
        if self._load_task is None:
            self._load_task = asyncio.get_running_loop().create_task(
                self.load(), name="linkpreview-cache-load"
            )
        return self._load_task

    async def load(self) -> dict[str, CacheEntry]:
        """Read the durable store into memory and return a snapshot.

        A store that cannot be read loads as empty; the cache still works,
        it just starts cold.
        """
        try:
            raw = await self._store.load_all()
        except Exception:
            logger.warning("Failed to load link cache, starting empty", exc_info=True)
            raw = {}

        with self._lock:
            for key, value in raw.items():
                if key not in self._touched:
                    self._entries[key] = CacheEntry.from_store_value(value)
            self._loaded = True
            self._touched.clear()
            snapshot = dict(self._entries)

        logger.info("Link cache loaded: %d entries", len(raw))
        return snapshot

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def wait_loaded(self) -> None:
        """Wait for a load started with ``start_loading``; returns at once otherwise."""
        if self._load_task is not None and not self._loaded:
            await asyncio.shield(self._load_task)

    # --- Reads ---

    def lookup(self, fingerprint: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(fingerprint)

    def entries(self) -> dict[str, CacheEntry]:
        """Snapshot of the whole map."""
        with self._lock:
            return dict(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        with self._lock:
            return fingerprint in self._entries

    # --- Writes ---

    async def put(self, fingerprint: str, entry: CacheEntry) -> None:
        """Upsert ``entry`` and write it through to the store."""
        if self._upsert(fingerprint, entry):
            await self._persist(fingerprint)

    def put_nowait(self, fingerprint: str, entry: CacheEntry) -> None:
        """Upsert ``entry`` now and schedule the write-through on the running loop.

        Raises:
            RuntimeError: No running loop. The map is left unchanged.
        """
        loop = asyncio.get_running_loop()
        if self._upsert(fingerprint, entry):
            self._schedule_persist(loop, fingerprint)

    async def delete(self, fingerprint: str) -> None:
        """Forget one entry, allowing the link to be resolved again."""
        with self._lock:
            self._entries.pop(fingerprint, None)
            if not self._loaded:
                self._touched.add(fingerprint)
        await self._persist(fingerprint)

    async def clear(self) -> None:
        """Forget every entry, in memory and in the store."""
        await self.flush()
        async with self._write_lock:
            with self._lock:
                if not self._loaded:
                    self._touched.update(self._entries)
                self._entries.clear()
            await self._store.clear()

    async def flush(self) -> None:
        """Wait for every scheduled write-through to finish."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    def _upsert(self, fingerprint: str, entry: CacheEntry) -> bool:
        with self._lock:
            if self._entries.get(fingerprint) == entry:
                return False
            self._entries[fingerprint] = entry
            if not self._loaded:
                self._touched.add(fingerprint)
            return True

    def _schedule_persist(self, loop: asyncio.AbstractEventLoop, fingerprint: str) -> None:
        task = loop.create_task(self._persist(fingerprint))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _persist(self, fingerprint: str) -> None:
        async with self._write_lock:
            current = self.lookup(fingerprint)
            try:
                if current is None:
                    await self._store.delete(fingerprint)
                else:
                    await self._store.put(fingerprint, current.to_store_value())
            except Exception:
                logger.warning(
                    "Write-through failed for fingerprint %s", fingerprint,
                    exc_info=True,
                )
