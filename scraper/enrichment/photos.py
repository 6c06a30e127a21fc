"""Fighter photo discovery.

Photo sources are tried as an ordered list of strategies. Each strategy takes
the fighter and returns a URL or ``None``; the first valid URL wins and later
strategies are never called.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Final

from parsel import Selector

from scraper.enrichment.biography import (
    BiographyLookupError,
    WikipediaClient,
    is_combat_sports_related,
)
from scraper.fetcher import DocumentFetcher, FetchError
from scraper.utils.names import generate_name_variations

logger = logging.getLogger(__name__)

DETAIL_PAGE_PHOTO_SELECTORS: Final[tuple[str, ...]] = (
    ".b-fighter-details__person-img img",
    ".b-content__main-photo img",
    ".fighter-photo img",
    "img[alt*='fighter']",
    "img[src*='fighter']",
)

_IMAGE_EXTENSIONS: Final[tuple[str, ...]] = (".jpg", ".jpeg", ".png", ".webp", ".gif")
_TRUSTED_IMAGE_HOSTS: Final[tuple[str, ...]] = ("upload.wikimedia.org", "ufcstats.com")

PhotoStrategy = Callable[[str, str | None], Awaitable[str | None]]


def find_detail_page_photo(page: Selector) -> str | None:
    """Return the first absolute image URL matched by the detail-page selectors."""
    for selector in DETAIL_PAGE_PHOTO_SELECTORS:
        images = page.css(selector)
        if not images:
            continue
        src = images[0].attrib.get("src")
        if src and "http" in src:
            return src.strip()
    return None


def is_valid_image_url(url: str | None) -> bool:
    if not url or not url.startswith("http"):
        return False
    lowered = url.lower()
    return any(ext in lowered for ext in _IMAGE_EXTENSIONS) or any(
        host in lowered for host in _TRUSTED_IMAGE_HOSTS
    )


async def fetch_detail_page_photo(fetcher: DocumentFetcher, detail_url: str) -> str | None:
    try:
        page = await fetcher.fetch(detail_url)
    except FetchError as exc:
        logger.debug("Detail page unavailable for photo lookup: %s", exc)
        return None
    return find_detail_page_photo(page)


class PhotoFinder:
    """Search several sources for a fighter photo, cheapest first."""

    def __init__(self, fetcher: DocumentFetcher, wikipedia: WikipediaClient | None = None) -> None:
        self._fetcher = fetcher
        self._wikipedia = wikipedia or WikipediaClient(fetcher)

    @property
    def strategies(self) -> Sequence[PhotoStrategy]:
        return (
            self._from_detail_page,
            self._from_summary,
            self._from_name_variations,
        )

    async def find_fighter_photo(self, name: str, detail_url: str | None = None) -> str | None:
        for strategy in self.strategies:
            try:
                photo_url = await strategy(name, detail_url)
            except Exception as exc:  # noqa: BLE001
                logger.debug("Photo strategy %s failed for %s: %s", strategy.__name__, name, exc)
                continue
            if is_valid_image_url(photo_url):
                logger.info("Photo for %s found via %s", name, strategy.__name__.lstrip("_"))
                return photo_url
        return None

    async def _from_detail_page(self, name: str, detail_url: str | None) -> str | None:
        if not detail_url:
            return None
        return await fetch_detail_page_photo(self._fetcher, detail_url)

    async def _from_summary(self, name: str, detail_url: str | None) -> str | None:
        summary = await self._wikipedia.fetch_summary(name)
        if not is_combat_sports_related(summary.extract):
            return None
        return summary.image_url

    async def _from_name_variations(self, name: str, detail_url: str | None) -> str | None:
        for variation in generate_name_variations(name):
            try:
                photo_url = await self._wikipedia.fetch_page_thumbnail(variation)
            except BiographyLookupError:
                continue
            if photo_url:
                return photo_url
        return None
