from __future__ import annotations

import logging

from scraper.enrichment.biography import (
    BiographyLookupError,
    BiographySummary,
    WikipediaClient,
    extract_birth_date,
    extract_birth_place,
    is_combat_sports_related,
)
from scraper.enrichment.photos import fetch_detail_page_photo
from scraper.fetcher import DocumentFetcher, FetchError
from scraper.models.fighter import EnrichmentRecord

logger = logging.getLogger(__name__)


class FighterEnricher:
    """Attach biography data from the secondary source to a fighter.

    The lookup runs in a fixed order: summary by exact name, relevance check,
    field extraction, then a detail-page photo when the summary had none. Lookup
    and network failures skip straight to the detail-page photo. ``enrich``
    returns ``None`` instead of raising when nothing usable was found.
    """

    def __init__(self, fetcher: DocumentFetcher, wikipedia: WikipediaClient | None = None) -> None:
        self._fetcher = fetcher
        self._wikipedia = wikipedia or WikipediaClient(fetcher)

    async def enrich(self, name: str, detail_url: str | None = None) -> EnrichmentRecord | None:
        try:
            summary = await self._wikipedia.fetch_summary(name)
        except (BiographyLookupError, FetchError) as exc:
            logger.info("No biography for %s (%s); trying detail page photo", name, exc)
            return await self._detail_photo_only(detail_url)

        if not is_combat_sports_related(summary.extract):
            logger.info("Biography for %s is not about a fighter; discarding", name)
            return None

        record = self._from_summary(summary)
        if not record.photo_url and detail_url:
            record.photo_url = await fetch_detail_page_photo(self._fetcher, detail_url)
        return record

    @staticmethod
    def _from_summary(summary: BiographySummary) -> EnrichmentRecord:
        extract = summary.extract or ""
        return EnrichmentRecord(
            photo_url=summary.image_url,
            biography=summary.extract or None,
            birth_place=extract_birth_place(extract),
            birth_date=extract_birth_date(extract),
            relevance_confirmed=True,
        )

    async def _detail_photo_only(self, detail_url: str | None) -> EnrichmentRecord | None:
        if not detail_url:
            return None
        photo_url = await fetch_detail_page_photo(self._fetcher, detail_url)
        if not photo_url:
            return None
        return EnrichmentRecord(photo_url=photo_url)
