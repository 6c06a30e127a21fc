"""Fight-history scraping and career summaries from fighter detail pages."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Final

from scraper.config import settings
from scraper.fetcher import DocumentFetcher, FetchError
from scraper.models.fighter import FightHistorySummary, FightRecord, FightResult
from scraper.utils.parser import parse_fight_history_rows

logger = logging.getLogger(__name__)

RECENT_FORM_LENGTH: Final[int] = 5

# First matching bucket wins; "tko" is covered by "ko".
_METHOD_BUCKETS: Final[tuple[tuple[tuple[str, ...], str], ...]] = (
    (("ko", "knockout"), "KO/TKO"),
    (("submission", "sub"), "Submission"),
    (("decision", "dec"), "Decision"),
    (("dq", "disqualification"), "DQ"),
    (("no contest",), "No Contest"),
)
_FINISH_KEYWORDS: Final[tuple[str, ...]] = ("ko", "submission", "sub")


def normalize_method(method: str | None) -> str:
    lowered = (method or "").lower()
    for keywords, label in _METHOD_BUCKETS:
        if any(keyword in lowered for keyword in keywords):
            return label
    return method or "Unknown"


def is_finish(method: str | None) -> bool:
    lowered = (method or "").lower()
    return any(keyword in lowered for keyword in _FINISH_KEYWORDS)


def analyze_fight_history(fights: Sequence[FightRecord]) -> FightHistorySummary:
    """Summarise a newest-first list of fights."""
    total = len(fights)
    if not total:
        return FightHistorySummary()

    results = Counter(fight.result for fight in fights)
    finishes = sum(1 for fight in fights if is_finish(fight.method))
    method_breakdown = Counter(normalize_method(fight.method) for fight in fights)

    return FightHistorySummary(
        total_fights=total,
        wins=results[FightResult.WIN],
        losses=results[FightResult.LOSS],
        draws=results[FightResult.DRAW],
        win_rate=round(results[FightResult.WIN] / total * 100),
        finish_rate=round(finishes / total * 100),
        title_fights=sum(1 for fight in fights if fight.is_title),
        method_breakdown=dict(method_breakdown),
        recent_form="".join(fight.result.value[0] for fight in fights[:RECENT_FORM_LENGTH]),
    )


class FightHistoryScraper:
    def __init__(
        self,
        fetcher: DocumentFetcher,
        *,
        delay_seconds: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._delay = settings.delay_seconds if delay_seconds is None else delay_seconds
        self._sleep = sleep

    async def scrape(self, detail_url: str) -> list[FightRecord]:
        """Return the fights listed on ``detail_url``; an unreachable page yields ``[]``."""
        try:
            response = await self._fetcher.fetch(detail_url)
        except FetchError as exc:
            logger.warning("Could not load fight history from %s: %s", detail_url, exc)
            return []

        fights = parse_fight_history_rows(response, base_url=settings.base_url)
        logger.info("Found %d fights at %s", len(fights), detail_url)
        return fights

    async def scrape_batch(
        self, fighters: Iterable[tuple[str, str]]
    ) -> dict[str, list[FightRecord]]:
        """Scrape ``(name, detail_url)`` pairs one after another."""
        pending = list(fighters)
        results: dict[str, list[FightRecord]] = {}
        for index, (name, detail_url) in enumerate(pending, start=1):
            logger.info("%d/%d: %s", index, len(pending), name)
            results[name] = await self.scrape(detail_url)
            if index < len(pending) and self._delay > 0:
                await self._sleep(self._delay)
        return results
