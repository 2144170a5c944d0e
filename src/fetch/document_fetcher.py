# src/fetch/document_fetcher.py — v1
"""HTTP document fetcher used to scrape article pages.

Only the transport lives here: a GET with the configured User-Agent,
redirects followed and the client's default timeout. Failures are mapped
onto the resolution error taxonomy so the coordinator can cache them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from linkpreview.core.errors import NetworkError, ParseError

logger = logging.getLogger(__name__)

_HTML_TYPES = ("text/html", "application/xhtml+xml", "application/xml", "text/xml")


@dataclass(frozen=True)
class FetchedDocument:
    url: str
    status_code: int
    text: str


class BaseDocumentFetcher(ABC):
    """Fetch a remote HTML document by URL."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedDocument:
        """Return the document body.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            ParseError: The body is not an HTML document.
        """

    async def aclose(self) -> None:
        """Release transport resources. No-op by default."""


class HttpxDocumentFetcher(BaseDocumentFetcher):
    """httpx-based fetcher sharing one AsyncClient across requests."""

    def __init__(
        self,
        user_agent: str = "Mozilla",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def fetch(self, url: str) -> FetchedDocument:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise NetworkError(url, f"request failed: {e!r}") from e

        content_type = response.headers.get("content-type", "text/html")
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime and mime not in _HTML_TYPES:
            raise ParseError(url, f"unsupported content type {mime!r}")

        try:
            text = response.text
        except (UnicodeDecodeError, LookupError) as e:
            raise ParseError(url, f"undecodable body: {e}") from e

        logger.debug("Fetched %s (%d, %d chars)", response.url, response.status_code, len(text))
        return FetchedDocument(url=str(response.url), status_code=response.status_code, text=text)

    async def aclose(self) -> None:
        await self._client.aclose()
