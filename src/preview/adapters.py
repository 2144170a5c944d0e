# src/preview/adapters.py — v1
"""Default collaborator implementations for headless use (CLI, services)."""

from __future__ import annotations

import logging
import webbrowser

from linkpreview.preview.interfaces import LinkLauncher, RenderTarget

logger = logging.getLogger(__name__)


class ConsoleRenderTarget(RenderTarget):
    """Records the rendered state and logs every change."""

    def __init__(self) -> None:
        self.visible = False
        self.text = ""
        self.image_url: str | None = None

    def set_visible(self, visible: bool) -> None:
        self.visible = visible
        logger.debug("Preview %s", "shown" if visible else "hidden")

    def set_text(self, text: str) -> None:
        self.text = text

    def set_image(self, image_url: str) -> None:
        self.image_url = image_url
        logger.debug("Preview image set to %s", image_url)


class WebbrowserLauncher(LinkLauncher):
    """Launcher backed by the stdlib ``webbrowser`` module.

    There is no embedded browser view here, so articles open in a new tab
    and the accent colour is ignored.
    """

    def open_article(self, url: str, accent_color: str) -> None:
        if not webbrowser.open_new_tab(url):
            raise RuntimeError(f"no browser available to open {url}")

    def open_external(self, url: str) -> None:
        if not webbrowser.open(url):
            raise RuntimeError(f"no handler available to open {url}")
