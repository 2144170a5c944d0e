# src/preview/controller.py — v2
"""Drives one preview surface: classify, look up, fetch, render, notify.

Per request:

    IDLE -> CLASSIFYING -> HIDDEN                      (no link)
                        -> RENDERING                   (YouTube, or cached image)
                        -> HIDDEN                      (cached failure)
                        -> FETCHING -> RENDERING | HIDDEN

All public methods run on the event loop, which is the only context that
touches the render target and the listener. Fetch completions arrive as task
done-callbacks on that same loop. A completion for a request that has been
superseded (new link, or ``destroy()``) leaves the render target alone but
still reports to the listener captured with that request.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from functools import partial

from linkpreview.cache.fingerprint import compute_fingerprint
from linkpreview.cache.models import CacheEntry
from linkpreview.cache.resolution_cache import ResolutionCache
from linkpreview.classifier.url_classifier import THUMBNAIL_URL, classify, youtube_thumbnail_url
from linkpreview.core.errors import ClickDispatchError, NetworkError
from linkpreview.core.models import (
    Classification,
    PreviewRequest,
    PreviewState,
    ResolutionKind,
    ResolutionOutcome,
)
from linkpreview.fetch.coordinator import FetchCoordinator
from linkpreview.logging.context import set_request_context
from linkpreview.preview.interfaces import (
    LinkClickListener,
    LinkLauncher,
    LinkListener,
    RenderTarget,
)

logger = logging.getLogger(__name__)


class PreviewController:
    """Link preview bound to a single render target."""

    def __init__(
        self,
        target: RenderTarget,
        cache: ResolutionCache,
        coordinator: FetchCoordinator,
        launcher: LinkLauncher | None = None,
        listener: LinkListener | None = None,
        click_listener: LinkClickListener | None = None,
        accent_color: str = "#00FFFF",
        thumbnail_template: str = THUMBNAIL_URL,
    ) -> None:
        self._target = target
        self._cache = cache
        self._coordinator = coordinator
        self._launcher = launcher
        self.listener = listener
        self.click_listener = click_listener
        self.accent_color = accent_color
        self._thumbnail_template = thumbnail_template

        self._state = PreviewState.IDLE
        self._generation = 0
        self._destroyed = False
        self._request: PreviewRequest | None = None
        self._pending: asyncio.Task[ResolutionOutcome] | None = None

        self._target.set_visible(False)

    # --- Introspection ---

    @property
    def state(self) -> PreviewState:
        return self._state

    @property
    def url(self) -> str:
        return self._request.url if self._request else ""

    @property
    def kind(self) -> ResolutionKind:
        return self._request.kind if self._request else ResolutionKind.NONE

    @property
    def pending(self) -> asyncio.Task[ResolutionOutcome] | None:
        """Fetch task of the current request, if it needed one."""
        return self._pending

    async def wait(self) -> None:
        """Wait until the current request's fetch has completed and been applied."""
        if self._pending is not None:
            await asyncio.shield(self._pending)

    # --- Entry points ---

    def parse_text_for_link(self, text: str) -> bool:
        """Search ``text`` for a link and preview it.

        Returns:
            True if a link was found, whatever the fetch eventually yields.
        """
        self._check_alive()
        request = self._begin(text)
        return self._apply(request, classify(text))

    def set_link(self, link: str) -> None:
        """Preview ``link``, which must be a bare URL.

        Raises:
            InvalidLinkError: ``link`` is not a URL. Nothing is changed.
        """
        self._check_alive()
        found = classify(link, strict=True)
        request = self._begin(link)
        self._apply(request, found)

    def on_click(self) -> None:
        """Open the previewed link according to its kind."""
        if self.click_listener is not None:
            self.click_listener.on_link_clicked(self.url)
            return

        kind = self.kind
        if kind is ResolutionKind.NONE:
            return
        if kind not in (ResolutionKind.GENERIC_ARTICLE, ResolutionKind.YOUTUBE_THUMBNAIL):
            raise AssertionError(f"Unhandled resolution kind: {kind!r}")
        if self._launcher is None:
            logger.debug("No launcher installed, ignoring click on %s", self.url)
            return

        try:
            if kind is ResolutionKind.GENERIC_ARTICLE:
                self._launcher.open_article(self.url, self.accent_color)
            else:
                self._launcher.open_external(self.url)
        except Exception as e:
            error = ClickDispatchError(f"Could not open {self.url}: {e}")
            logger.warning("%s", error, exc_info=True)

    def destroy(self) -> None:
        """Tear down the surface. Running fetches finish and fill the cache."""
        self._destroyed = True
        self._generation += 1

    # --- Request handling ---

    def _check_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError("PreviewController has been destroyed")

    def _begin(self, text: str) -> PreviewRequest:
        self._generation += 1
        self._pending = None
        self._state = PreviewState.CLASSIFYING
        self._request = PreviewRequest(
            request_id=uuid.uuid4().hex[:12],
            generation=self._generation,
            text=text,
            listener=self.listener,
        )
        return self._request

    def _apply(self, request: PreviewRequest, found: Classification | None) -> bool:
        if found is None:
            self._hide()
            return False

        request.url = found.url
        request.kind = found.kind
        request.fingerprint = compute_fingerprint(found.url)
        set_request_context(request.request_id, link=request.url, kind=request.kind.value)

        if found.kind is ResolutionKind.YOUTUBE_THUMBNAIL:
            self._show_youtube(request, found.video_id or "")
        elif found.kind is ResolutionKind.GENERIC_ARTICLE:
            self._show_article(request)
        elif found.kind is ResolutionKind.NONE:
            self._hide()
            return False
        else:
            raise AssertionError(f"Unhandled resolution kind: {found.kind!r}")
        return True

    def _show_youtube(self, request: PreviewRequest, video_id: str) -> None:
        image_url = youtube_thumbnail_url(video_id, self._thumbnail_template)
        try:
            self._cache.put_nowait(request.fingerprint, CacheEntry.image(image_url))
        except RuntimeError:
            logger.exception("Could not cache thumbnail for %s", request.url)
            self._hide()
            _notify(request.listener, None)
            return
        self._render(request, image_url)
        _notify(request.listener, image_url)

    def _show_article(self, request: PreviewRequest) -> None:
        entry = self._cache.lookup(request.fingerprint)
        if entry is not None:
            if entry.failed:
                logger.debug("Cached failure for %s, not fetching", request.url)
                self._hide()
                _notify(request.listener, None)
            else:
                self._render(request, entry.image_url)
                _notify(request.listener, entry.image_url)
            return

        self._target.set_text(request.url)
        self._target.set_visible(True)
        try:
            task = self._coordinator.dispatch(request.url, request.fingerprint)
        except RuntimeError:
            logger.exception("Could not dispatch fetch for %s", request.url)
            self._hide()
            _notify(request.listener, None)
            return

        self._state = PreviewState.FETCHING
        self._pending = task
        task.add_done_callback(partial(self._on_resolved, request))

    def _on_resolved(
        self, request: PreviewRequest, task: asyncio.Task[ResolutionOutcome]
    ) -> None:
        outcome = _task_outcome(request.url, task)

        if self._destroyed or request.generation != self._generation:
            logger.debug("Dropping stale result for %s", request.url)
        elif outcome.failed:
            self._hide()
        else:
            self._render(request, outcome.image_url)

        _notify(request.listener, outcome.image_url)

    def _render(self, request: PreviewRequest, image_url: str) -> None:
        self._target.set_image(image_url)
        self._target.set_text(request.url)
        self._target.set_visible(True)
        self._state = PreviewState.RENDERING

    def _hide(self) -> None:
        self._target.set_visible(False)
        self._state = PreviewState.HIDDEN


def _task_outcome(url: str, task: asyncio.Task[ResolutionOutcome]) -> ResolutionOutcome:
    if task.cancelled():
        return ResolutionOutcome(error=NetworkError(url, "fetch cancelled"))
    error = task.exception()
    if error is not None:
        logger.error("Fetch task for %s crashed", url, exc_info=error)
        return ResolutionOutcome(error=NetworkError(url, f"fetch crashed: {error!r}"))
    return task.result()


def _notify(listener: LinkListener | None, image_url: str | None) -> None:
    """Report to ``listener``; a failing listener is logged, never propagated."""
    if listener is None:
        return
    try:
        if image_url is None:
            listener.on_error()
        else:
            listener.on_success(image_url)
    except Exception:
        logger.exception("Link listener raised")
