# tests/conftest.py — v2
"""Shared test fixtures: fake render target, listener, fetcher and store.

No network access; all HTTP goes through FakeFetcher or httpx.MockTransport.
"""

from __future__ import annotations

import asyncio

import pytest

from linkpreview.cache.memory_store import MemoryCacheStore
from linkpreview.cache.resolution_cache import ResolutionCache
from linkpreview.core.errors import ResolutionError
from linkpreview.fetch.coordinator import FetchCoordinator
from linkpreview.fetch.document_fetcher import BaseDocumentFetcher, FetchedDocument
from linkpreview.preview.controller import PreviewController
from linkpreview.preview.interfaces import LinkLauncher, LinkListener, RenderTarget


def og_page(image_url: str) -> str:
    return (
        "<html><head>"
        f'<meta property="og:image" content="{image_url}">'
        "<title>t</title></head><body>hi</body></html>"
    )


PLAIN_PAGE = "<html><head><title>No preview</title></head><body>hi</body></html>"


class FakeRenderTarget(RenderTarget):
    def __init__(self) -> None:
        self.visible = False
        self.text = ""
        self.image_url: str | None = None
        self.calls: list[tuple[str, object]] = []

    def set_visible(self, visible: bool) -> None:
        self.calls.append(("visible", visible))
        self.visible = visible

    def set_text(self, text: str) -> None:
        self.calls.append(("text", text))
        self.text = text

    def set_image(self, image_url: str) -> None:
        self.calls.append(("image", image_url))
        self.image_url = image_url


class RecordingListener(LinkListener):
    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors = 0

    def on_success(self, image_url: str) -> None:
        self.successes.append(image_url)

    def on_error(self) -> None:
        self.errors += 1


class RecordingLauncher(LinkLauncher):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.articles: list[tuple[str, str]] = []
        self.external: list[str] = []

    def open_article(self, url: str, accent_color: str) -> None:
        if self.fail:
            raise OSError("no browser")
        self.articles.append((url, accent_color))

    def open_external(self, url: str) -> None:
        if self.fail:
            raise OSError("no handler")
        self.external.append(url)


class FakeFetcher(BaseDocumentFetcher):
    """Serves canned pages. Fetches block on ``gate`` while it is unset."""

    def __init__(self, pages: dict[str, str | Exception] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []
        self.gate = asyncio.Event()
        self.gate.set()
        self.closed = False

    async def fetch(self, url: str) -> FetchedDocument:
        self.calls.append(url)
        await self.gate.wait()
        page = self.pages.get(url)
        if page is None:
            raise ResolutionError(url, "no canned page")
        if isinstance(page, Exception):
            raise page
        return FetchedDocument(url=url, status_code=200, text=page)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def cache(store) -> ResolutionCache:
    return ResolutionCache(store)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def coordinator(cache, fetcher) -> FetchCoordinator:
    return FetchCoordinator(cache, fetcher)


@pytest.fixture
def target() -> FakeRenderTarget:
    return FakeRenderTarget()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture
def controller(target, cache, coordinator, launcher, listener) -> PreviewController:
    return PreviewController(
        target=target,
        cache=cache,
        coordinator=coordinator,
        launcher=launcher,
        listener=listener,
    )
