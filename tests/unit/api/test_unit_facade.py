# tests/unit/api/test_unit_facade.py — v2
"""Tests for api/facade.py."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeFetcher, FakeRenderTarget, PLAIN_PAGE, og_page

from linkpreview.api.facade import create_engine, preview_text
from linkpreview.cache.fingerprint import compute_fingerprint
from linkpreview.cache.memory_store import MemoryCacheStore
from linkpreview.config.settings import Settings
from linkpreview.core.errors import InvalidLinkError
from linkpreview.core.models import PreviewState, ResolutionKind

ARTICLE = "https://example.com/story"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, cache_backend="memory", accent_color="#112233")


class TestCreateEngine:
    @pytest.mark.asyncio
    async def test_loads_store_and_wires_controller(self, settings):
        store = MemoryCacheStore({compute_fingerprint(ARTICLE): "https://img/disk.jpg"})
        engine = await create_engine(settings, store=store, fetcher=FakeFetcher(), wait_for_cache=True)
        assert engine.cache.is_loaded

        target = FakeRenderTarget()
        controller = engine.create_controller(target)
        assert controller.accent_color == "#112233"
        controller.parse_text_for_link(ARTICLE)
        assert target.image_url == "https://img/disk.jpg"
        await engine.aclose()

    @pytest.mark.asyncio
    async def test_aclose_flushes_writes(self, settings):
        store = MemoryCacheStore()
        engine = await create_engine(settings, store=store, fetcher=FakeFetcher())
        engine.create_controller(FakeRenderTarget()).parse_text_for_link("https://youtu.be/abc123")
        await engine.aclose()
        assert list((await store.load_all()).values()) == [
            "https://img.youtube.com/vi/abc123/hqdefault.jpg"
        ]

    @pytest.mark.asyncio
    async def test_accepts_thread_submissions_straight_away(self, settings):
        fetcher = FakeFetcher({ARTICLE: og_page("https://img/story.jpg")})
        engine = await create_engine(settings, store=MemoryCacheStore(), fetcher=fetcher)
        fp = compute_fingerprint(ARTICLE)
        loop = asyncio.get_running_loop()

        def from_thread():
            return engine.coordinator.resolve_threadsafe(ARTICLE, fp).result(timeout=5)

        outcomes = await asyncio.gather(
            *(loop.run_in_executor(None, from_thread) for _ in range(4))
        )
        await engine.aclose()

        assert len(outcomes) == 4
        assert {o.image_url for o in outcomes} == {"https://img/story.jpg"}
        assert engine.coordinator.fetch_count == 1
        assert fetcher.calls == [ARTICLE]


class TestPreviewText:
    @pytest.mark.asyncio
    async def test_article(self, settings):
        fetcher = FakeFetcher({ARTICLE: og_page("https://img/story.jpg")})
        engine = await create_engine(settings, fetcher=fetcher, wait_for_cache=True)
        result = await preview_text(f"read {ARTICLE}", engine=engine)
        await engine.aclose()

        assert result.found is True
        assert result.kind is ResolutionKind.GENERIC_ARTICLE
        assert result.state is PreviewState.RENDERING
        assert result.image_url == "https://img/story.jpg"
        assert result.error is None

    @pytest.mark.asyncio
    async def test_failure(self, settings):
        engine = await create_engine(settings, fetcher=FakeFetcher({ARTICLE: PLAIN_PAGE}))
        result = await preview_text(ARTICLE, engine=engine)
        await engine.aclose()

        assert result.found is True
        assert result.visible is False
        assert result.image_url is None
        assert result.error == "no preview image"

    @pytest.mark.asyncio
    async def test_not_found(self, settings):
        engine = await create_engine(settings, fetcher=FakeFetcher())
        result = await preview_text("nothing to see", engine=engine)
        await engine.aclose()
        assert result.found is False
        assert result.state is PreviewState.HIDDEN

    @pytest.mark.asyncio
    async def test_strict_rejects_text(self, settings):
        engine = await create_engine(settings, fetcher=FakeFetcher())
        with pytest.raises(InvalidLinkError):
            await preview_text("not a url", strict=True, engine=engine)
        await engine.aclose()
