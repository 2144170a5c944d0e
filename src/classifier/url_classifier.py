# src/classifier/url_classifier.py — v1
"""Find a previewable link in free text and decide how to resolve it.

Rules, in order:
  1. ``youtube`` + ``v=`` marker      -> YouTube thumbnail (long form)
  2. ``youtu.be/`` marker              -> YouTube thumbnail (short form)
  3. ``http`` anywhere                 -> last whitespace token that is a web URL
  4. otherwise                         -> not found

The video id is everything after the marker up to the next whitespace.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from linkpreview.core.errors import InvalidLinkError
from linkpreview.core.models import Classification, ResolutionKind

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"

_ARTICLE_URL = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{2,256}\.[a-z]{2,6}\b"
    r"([-a-zA-Z0-9@:%_+.~#?&/=]*)"
)
_HOST = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$"
    r"|^\d{1,3}(?:\.\d{1,3}){3}$"
    r"|^localhost$",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s")


def classify(text: str, strict: bool = False) -> Classification | None:
    """Classify ``text`` and return the canonical URL and its kind.

    Args:
        text: Free text possibly containing a link, or a bare link when
            ``strict`` is set.
        strict: The caller asserts ``text`` is exactly one URL. No extraction
            is attempted; the string is validated as-is.

    Returns:
        Classification, or None when no previewable link was found.

    Raises:
        InvalidLinkError: ``strict`` is set and ``text`` is not a URL.
    """
    if strict:
        link = text.strip()
        if not is_url(link):
            raise InvalidLinkError(text)
        return _classify_youtube(link) or Classification(
            url=link, kind=ResolutionKind.GENERIC_ARTICLE
        )

    found = _classify_youtube(text)
    if found is not None:
        return found

    if "http" in text:
        url = _last_article_url(text)
        if url is None:
            logger.debug("Text mentions http but holds no matching URL")
            return None
        return Classification(url=url, kind=ResolutionKind.GENERIC_ARTICLE)

    return None


def is_url(text: str) -> bool:
    """True if ``text`` is a single absolute http(s) URL with a plausible host."""
    if not text or _WHITESPACE.search(text):
        return False
    try:
        parts = urlsplit(text)
        host = parts.hostname
    except ValueError:
        return False
    if parts.scheme.lower() not in ("http", "https") or not host:
        return False
    return bool(_HOST.match(host))


def youtube_thumbnail_url(video_id: str, template: str = THUMBNAIL_URL) -> str:
    """Thumbnail image URL for a YouTube video id."""
    return template.format(video_id=video_id)


def _classify_youtube(text: str) -> Classification | None:
    if "youtube" in text and "v=" in text:
        video_id = _token_after(text, "v=")
    elif "youtu.be/" in text:
        video_id = _token_after(text, "youtu.be/")
    else:
        return None

    if not video_id:
        return None
    return Classification(
        url=WATCH_URL.format(video_id=video_id),
        kind=ResolutionKind.YOUTUBE_THUMBNAIL,
        video_id=video_id,
    )


def _token_after(text: str, marker: str) -> str:
    tail = text.split(marker, 1)[1]
    return _WHITESPACE.split(tail, 1)[0]


def _last_article_url(text: str) -> str | None:
    url = None
    for token in text.split():
        if _ARTICLE_URL.fullmatch(token):
            url = token
    return url
