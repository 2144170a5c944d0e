# src/fetch/og_image.py — v1
"""Extract the og:image preview URL from an HTML document."""

from __future__ import annotations

from bs4 import BeautifulSoup

from linkpreview.core.errors import NoImageFound, ParseError


def extract_og_image(html: str, url: str = "") -> str:
    """Return the ``content`` of the first ``<meta property="og:image">``.

    Raises:
        ParseError: The document could not be parsed.
        NoImageFound: No og:image tag, or the tag has an empty content.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ParseError(url, f"HTML parse failed: {e}") from e

    tag = soup.find("meta", attrs={"property": "og:image"})
    if tag is None:
        raise NoImageFound(url, "no og:image meta tag")

    content = (tag.get("content") or "").strip()
    if not content:
        raise NoImageFound(url, "og:image meta tag has no content")
    return content
