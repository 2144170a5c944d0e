# src/core/errors.py — v1
"""Exception taxonomy.

Only InvalidLinkError and ConfigurationError reach callers. Resolution errors
are caught by the fetch coordinator and reported through the outcome and the
listener; ClickDispatchError is logged and swallowed by the controller.
"""

from __future__ import annotations


class LinkPreviewError(Exception):
    """Base class for all linkpreview errors."""


class InvalidLinkError(LinkPreviewError, ValueError):
    """A strict-link entry point was given something that is not a URL."""

    def __init__(self, link: str) -> None:
        super().__init__(
            f"String is not a valid link: {link!r}. "
            "To search free text for a link use parse_text_for_link()."
        )
        self.link = link


class ResolutionError(LinkPreviewError):
    """A preview image could not be resolved for a URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class NetworkError(ResolutionError):
    """Transport failure or non-success HTTP status."""


class ParseError(ResolutionError):
    """The response body could not be read as an HTML document."""


class NoImageFound(ResolutionError):
    """The document has no usable og:image meta tag."""


class ClickDispatchError(LinkPreviewError):
    """Launching a viewer for a clicked preview failed."""
