# src/cache/redis_store.py — v3
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires the 'redis' package: pip install linkpreview[redis].
All fingerprints live in a single hash so load_all is one HGETALL.
Client calls run in worker threads to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import logging

from linkpreview.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

_HASH_KEY = "linkpreview:links"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store shared between processes."""

    def __init__(self, redis_url: str, hash_key: str = _HASH_KEY, client=None) -> None:
        if client is None:
            try:
                import redis
            except ImportError as e:
                raise ImportError(
                    "redis package required: pip install linkpreview[redis]"
                ) from e
            client = redis.Redis.from_url(redis_url, decode_responses=True)

        self._client = client
        self._hash_key = hash_key

    async def load_all(self) -> dict[str, str]:
        return dict(await asyncio.to_thread(self._client.hgetall, self._hash_key))

    async def put(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._client.hset, self._hash_key, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._client.hdel, self._hash_key, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._client.delete, self._hash_key)

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
