# src/fetch/coordinator.py — v2
"""Deduplicated, cancellation-safe resolution of article preview images.

At most one fetch is in flight per fingerprint. A second ``resolve`` for the
same fingerprint attaches to the running task instead of issuing another
request. Each caller awaits the task through ``asyncio.shield``, so a caller
that gives up (or whose preview is torn down) never cancels the fetch; the
result still lands in the cache for the next request.

Every fetch outcome is written to the cache before any waiter is woken:
an image URL on success, the sticky failure marker otherwise.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging

from linkpreview.cache.models import CacheEntry
from linkpreview.cache.resolution_cache import ResolutionCache
from linkpreview.core.errors import NetworkError, ResolutionError
from linkpreview.core.models import ResolutionOutcome
from linkpreview.fetch.document_fetcher import BaseDocumentFetcher
from linkpreview.fetch.og_image import extract_og_image

logger = logging.getLogger(__name__)


class FetchCoordinator:
    """Resolve generic article URLs to og:image URLs, once per fingerprint."""

    def __init__(
        self,
        cache: ResolutionCache,
        fetcher: BaseDocumentFetcher,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Bind to ``loop``, or to the running loop when built on one."""
        self._cache = cache
        self._fetcher = fetcher
        self._loop = loop or _running_loop()
        self._inflight: dict[str, asyncio.Task[ResolutionOutcome]] = {}
        self.fetch_count = 0

    @property
    def in_flight(self) -> int:
        return len(self._inflight)

    def is_in_flight(self, fingerprint: str) -> bool:
        return fingerprint in self._inflight

    async def resolve(self, url: str, fingerprint: str) -> ResolutionOutcome:
        """Resolve ``url``, joining an in-flight fetch for ``fingerprint`` if any.

        Never raises for fetch failures; they come back as a failed outcome.
        """
        return await asyncio.shield(self.dispatch(url, fingerprint))

    def dispatch(self, url: str, fingerprint: str) -> asyncio.Task[ResolutionOutcome]:
        """Return the task resolving ``fingerprint``, starting it if needed.

        Must be called on the event loop that owns the coordinator.
        """
        task = self._inflight.get(fingerprint)
        if task is not None:
            logger.debug("Joining in-flight fetch for %s", url)
            return task

        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop

        task = loop.create_task(
            self._fetch_and_store(url, fingerprint),
            name=f"linkpreview-fetch-{fingerprint}",
        )
        self._inflight[fingerprint] = task
        task.add_done_callback(lambda _t: self._inflight.pop(fingerprint, None))
        return task

    def resolve_threadsafe(
        self, url: str, fingerprint: str
    ) -> concurrent.futures.Future[ResolutionOutcome]:
        """Submit ``resolve`` from another thread to the coordinator's loop.

        The dedup map is only ever touched on that loop, so concurrent
        submissions from many threads still produce a single fetch.
        """
        if self._loop is None:
            raise RuntimeError("FetchCoordinator is not bound to an event loop yet")
        return asyncio.run_coroutine_threadsafe(self.resolve(url, fingerprint), self._loop)

    async def aclose(self) -> None:
        """Wait for in-flight fetches, then close the fetcher."""
        pending = list(self._inflight.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self._fetcher.aclose()

    async def _fetch_and_store(self, url: str, fingerprint: str) -> ResolutionOutcome:
        # A load still in progress may already hold this key.
        await self._cache.wait_loaded()
        cached = self._cache.lookup(fingerprint)
        if cached is not None:
            logger.debug("Resolved %s from cache after load", url)
            return _outcome_from_entry(url, cached)

        outcome = await self._fetch(url)

        entry = CacheEntry.failure() if outcome.failed else CacheEntry.image(outcome.image_url)
        await self._cache.put(fingerprint, entry)
        return outcome

    async def _fetch(self, url: str) -> ResolutionOutcome:
        self.fetch_count += 1
        logger.info("Finding article image for %s", url)
        try:
            document = await self._fetcher.fetch(url)
            image_url = extract_og_image(document.text, url)
        except ResolutionError as e:
            logger.warning("Article image not resolved: %s", e)
            return ResolutionOutcome(error=e)
        except Exception as e:
            logger.exception("Unexpected error resolving %s", url)
            return ResolutionOutcome(error=NetworkError(url, f"unexpected error: {e!r}"))

        logger.debug("Article image for %s is %s", url, image_url)
        return ResolutionOutcome(image_url=image_url)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _outcome_from_entry(url: str, entry: CacheEntry) -> ResolutionOutcome:
    if entry.failed:
        return ResolutionOutcome(error=ResolutionError(url, "cached failure"))
    return ResolutionOutcome(image_url=entry.image_url)
