"""HTTP access for the enrichment pipeline.

Every request goes through :class:`DocumentFetcher` so callers only have to
care about one failure type, :class:`FetchError`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from scrapy.http import HtmlResponse

from scraper.config import settings

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a document cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class NotFoundError(FetchError):
    """The remote server answered 404 for the requested document."""


class DocumentFetcher:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        user_agent: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._owns_client = client is None
        self._timeout = timeout if timeout is not None else settings.timeout_seconds
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent or settings.user_agent},
            follow_redirects=True,
        )

    async def __aenter__(self) -> DocumentFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.get(
                url, params=params, headers=headers, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        if response.status_code == 404:
            raise NotFoundError(url, "not found")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"HTTP {response.status_code}") from exc
        return response

    async def fetch(self, url: str, *, headers: dict[str, str] | None = None) -> HtmlResponse:
        """Return the page at ``url`` wrapped in a Scrapy ``HtmlResponse``."""
        response = await self._get(url, headers=headers)
        encoding = response.encoding or "utf-8"
        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return HtmlResponse(url=str(response.url), body=response.content, encoding=encoding)

    async def fetch_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await self._get(url, params=params, headers=headers)
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(url, "invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise FetchError(url, "unexpected JSON payload")
        return payload
