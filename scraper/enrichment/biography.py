"""Biography lookups against the Wikipedia REST and action APIs.

The summary endpoint returns ``{extract, thumbnail: {source}, originalimage:
{source}}``; only those fields are modelled. Text helpers in this module are
pure so the enricher and the photo finder can share them.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Final
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from scraper.config import settings
from scraper.fetcher import DocumentFetcher, FetchError

logger = logging.getLogger(__name__)

RELEVANCE_KEYWORDS: Final[tuple[str, ...]] = (
    "mixed martial arts",
    "mma",
    "ufc",
    "fighter",
    "fighting",
    "combat",
    "martial arts",
    "cage",
    "octagon",
    "bellator",
    "wrestling",
    "boxing",
    "jiu-jitsu",
    "muay thai",
    "kickboxing",
)

_BIRTH_PLACE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"born in ([^,]+)", re.IGNORECASE),
    re.compile(r"from ([^,]+)", re.IGNORECASE),
    re.compile(r"native of ([^,]+)", re.IGNORECASE),
)
_BIRTH_DATE_RE: Final[re.Pattern[str]] = re.compile(
    r"born[^,]*?(\w+ \d{1,2}, \d{4})", re.IGNORECASE
)


class BiographyLookupError(Exception):
    """The biography service had no page for the name or could not be reached."""


class ImageSource(BaseModel):
    source: str | None = None


class BiographySummary(BaseModel):
    title: str | None = None
    extract: str | None = None
    thumbnail: ImageSource | None = None
    originalimage: ImageSource | None = None

    @property
    def image_url(self) -> str | None:
        if self.thumbnail and self.thumbnail.source:
            return self.thumbnail.source
        if self.originalimage and self.originalimage.source:
            return self.originalimage.source
        return None


def is_combat_sports_related(text: str | None) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in RELEVANCE_KEYWORDS)


def extract_birth_place(text: str | None) -> str | None:
    if not text:
        return None
    for pattern in _BIRTH_PLACE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip() or None
    return None


def extract_birth_date(text: str | None) -> str | None:
    if not text:
        return None
    match = _BIRTH_DATE_RE.search(text)
    return match.group(1).strip() if match else None


class WikipediaClient:
    def __init__(self, fetcher: DocumentFetcher) -> None:
        self._fetcher = fetcher
        self._headers = {"User-Agent": settings.bio_user_agent}

    async def fetch_summary(self, name: str) -> BiographySummary:
        url = f"{settings.wikipedia_summary_url}/{quote(name, safe='')}"
        try:
            payload = await self._fetcher.fetch_json(url, headers=self._headers)
        except FetchError as exc:
            raise BiographyLookupError(f"No biography summary for {name!r}: {exc.reason}") from exc
        try:
            return BiographySummary.model_validate(payload)
        except ValidationError as exc:
            raise BiographyLookupError(f"Malformed biography summary for {name!r}") from exc

    async def fetch_page_thumbnail(self, title: str, *, size: int = 300) -> str | None:
        params: dict[str, Any] = {
            "action": "query",
            "format": "json",
            "titles": title,
            "prop": "pageimages",
            "pithumbsize": str(size),
        }
        try:
            payload = await self._fetcher.fetch_json(
                settings.wikipedia_api_url, params=params, headers=self._headers
            )
        except FetchError as exc:
            raise BiographyLookupError(f"Page image lookup failed for {title!r}: {exc.reason}") from exc

        pages = payload.get("query", {}).get("pages") or {}
        for page in pages.values():
            thumbnail = page.get("thumbnail") or {}
            if thumbnail.get("source"):
                return thumbnail["source"]
        return None
