# src/cache/base_cache_store.py — v2
"""Abstract durable store behind the resolution cache.

Keys are fingerprints, values are store-encoded CacheEntry strings (an image
URL or the failure sentinel). The cache only needs get-all at startup and
put-one afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def load_all(self) -> dict[str, str]:
        """Return every stored fingerprint -> value pair."""

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Insert or replace one value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove one value; missing keys are ignored."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every value."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""
