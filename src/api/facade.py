# src/api/facade.py — v3
"""Public API facade: wire the engine from Settings and run one-shot previews.

Usage:
    from linkpreview.api.facade import create_engine, preview_text

    engine = await create_engine()
    controller = engine.create_controller(my_render_target, listener=my_listener)
    controller.parse_text_for_link("read https://example.com/story")

    result = await preview_text("watch https://youtu.be/abc123")
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from linkpreview.api.models import PreviewResult
from linkpreview.cache.base_cache_store import BaseCacheStore
from linkpreview.cache.cache_factory import create_cache_store
from linkpreview.cache.resolution_cache import ResolutionCache
from linkpreview.config.settings import Settings
from linkpreview.fetch.coordinator import FetchCoordinator
from linkpreview.fetch.document_fetcher import BaseDocumentFetcher, HttpxDocumentFetcher
from linkpreview.preview.adapters import ConsoleRenderTarget, WebbrowserLauncher
from linkpreview.preview.controller import PreviewController
from linkpreview.preview.interfaces import (
    LinkClickListener,
    LinkLauncher,
    LinkListener,
    RenderTarget,
)

logger = logging.getLogger(__name__)


@dataclass
class PreviewEngine:
    """Shared cache + coordinator that every preview surface plugs into."""

    settings: Settings
    store: BaseCacheStore
    cache: ResolutionCache
    coordinator: FetchCoordinator

    def create_controller(
        self,
        target: RenderTarget,
        listener: LinkListener | None = None,
        click_listener: LinkClickListener | None = None,
        launcher: LinkLauncher | None = None,
    ) -> PreviewController:
        return PreviewController(
            target=target,
            cache=self.cache,
            coordinator=self.coordinator,
            launcher=launcher or WebbrowserLauncher(),
            listener=listener,
            click_listener=click_listener,
            accent_color=self.settings.accent_color,
            thumbnail_template=self.settings.youtube_thumbnail_template,
        )

    async def aclose(self) -> None:
        """Finish in-flight fetches and pending cache writes, then release resources."""
        await self.coordinator.aclose()
        await self.cache.flush()
        self.store.close()


async def create_engine(
    settings: Settings | None = None,
    store: BaseCacheStore | None = None,
    fetcher: BaseDocumentFetcher | None = None,
    wait_for_cache: bool = False,
) -> PreviewEngine:
    """Build the engine and start loading the durable cache in the background.

    Args:
        settings: Global settings. Loaded from .env if None.
        store: Durable store. Built from ``settings.cache_backend`` if None.
        fetcher: Document fetcher. httpx with ``settings.user_agent`` if None.
        wait_for_cache: Block until the cache is loaded before returning.
    """
    settings = settings or Settings()
    store = store or create_cache_store(settings)
    fetcher = fetcher or HttpxDocumentFetcher(user_agent=settings.user_agent)

    cache = ResolutionCache(store)
    cache.start_loading()
    if wait_for_cache:
        await cache.wait_loaded()

    logger.debug("Preview engine ready (cache backend=%s)", settings.cache_backend)
    return PreviewEngine(
        settings=settings,
        store=store,
        cache=cache,
        coordinator=FetchCoordinator(cache, fetcher, loop=asyncio.get_running_loop()),
    )


async def preview_text(
    text: str,
    strict: bool = False,
    engine: PreviewEngine | None = None,
    settings: Settings | None = None,
) -> PreviewResult:
    """Preview ``text`` once and wait for the result.

    Raises:
        InvalidLinkError: ``strict`` is set and ``text`` is not a URL.
    """
    own_engine = engine is None
    if engine is None:
        engine = await create_engine(settings, wait_for_cache=True)

    target = ConsoleRenderTarget()
    listener = _CollectingListener()
    controller = engine.create_controller(target, listener=listener)
    try:
        if strict:
            controller.set_link(text)
            found = True
        else:
            found = controller.parse_text_for_link(text)
        await controller.wait()
    finally:
        if own_engine:
            await engine.aclose()

    return PreviewResult(
        found=found,
        url=controller.url,
        kind=controller.kind,
        state=controller.state,
        image_url=target.image_url if target.visible else None,
        visible=target.visible,
        error="no preview image" if listener.failed else None,
    )


class _CollectingListener(LinkListener):
    def __init__(self) -> None:
        self.image_url: str | None = None
        self.failed = False

    def on_success(self, image_url: str) -> None:
        self.image_url = image_url

    def on_error(self) -> None:
        self.failed = True
