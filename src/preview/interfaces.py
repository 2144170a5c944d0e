# src/preview/interfaces.py — v1
"""Collaborator interfaces consumed or exposed by the preview controller."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RenderTarget(ABC):
    """Display surface for one preview: a text line, an image and a visibility flag."""

    @abstractmethod
    def set_visible(self, visible: bool) -> None: ...

    @abstractmethod
    def set_text(self, text: str) -> None: ...

    @abstractmethod
    def set_image(self, image_url: str) -> None:
        """Load and show the image at ``image_url``."""


class LinkListener(ABC):
    """Optional load callbacks, invoked once per request on the event loop."""

    @abstractmethod
    def on_success(self, image_url: str) -> None: ...

    @abstractmethod
    def on_error(self) -> None: ...


class LinkClickListener(ABC):
    """Overrides the default click-through behaviour when installed."""

    @abstractmethod
    def on_link_clicked(self, url: str) -> None: ...


class LinkLauncher(ABC):
    """Opens previewed links outside the preview itself."""

    @abstractmethod
    def open_article(self, url: str, accent_color: str) -> None:
        """Open an article in an embedded browser view tinted with ``accent_color``."""

    @abstractmethod
    def open_external(self, url: str) -> None:
        """Hand ``url`` to the system's default handler."""
