from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime

from parsel import Selector

from scraper.config import settings
from scraper.models.fighter import BasicFighterRecord, FightRecord, FightResult
from scraper.utils.units import height_to_metric, reach_to_metric, weight_to_metric
from scraper.utils.weight_classes import classify

logger = logging.getLogger(__name__)

# The listing table has ten data columns; anything shorter is a header,
# spacer or otherwise malformed row.
MIN_LIST_CELLS = 10
MIN_FIGHT_CELLS = 7

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class PrimaryRow:
    """Cell texts of one listing row plus the fighter detail link, if any."""

    cells: tuple[str, ...]
    detail_url: str | None = None


def clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = " ".join(value.split())
    if not text or text == "--":
        return None
    return text


def absolute_url(url: str | None, base_url: str | None = None) -> str | None:
    text = clean_text(url)
    if not text:
        return None
    if text.startswith("http"):
        return text
    base = (base_url or settings.base_url).rstrip("/")
    return f"{base}/{text.lstrip('/')}"


def parse_date(value: str | None) -> str | None:
    text = clean_text(value)
    if not text:
        return None
    # Remove periods after month abbreviations (e.g., "Nov. 16, 2024" -> "Nov 16, 2024")
    text_normalized = text.replace(".", "")
    for fmt in ("%B %d, %Y", "%b %d, %Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(text_normalized, fmt).date().isoformat()
        except ValueError:
            continue
    return text


def _parse_count(value: str | None) -> int:
    """Parse a win/loss/draw cell, treating anything unreadable as zero."""
    if not value:
        return 0
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else 0


def _parse_int(value: str | None) -> int | None:
    text = clean_text(value)
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _cell_text(cell: Selector) -> str:
    return clean_text(" ".join(cell.css("::text").getall())) or ""


def _cell_at(cells: list[Selector], index: int) -> Selector | None:
    return cells[index] if index < len(cells) else None


def extract_primary_rows(response: Selector) -> list[PrimaryRow]:
    """Collect the raw rows of a stats listing page."""
    rows: list[PrimaryRow] = []
    for row in response.css("tr.b-statistics__table-row"):
        if row.css("th"):
            continue
        cells = tuple(_cell_text(cell) for cell in row.css("td"))
        detail_url = clean_text(row.css("td:first-child a::attr(href)").get())
        rows.append(PrimaryRow(cells=cells, detail_url=detail_url))
    return rows


def parse_fighter_list_row(
    row: PrimaryRow, *, base_url: str | None = None
) -> BasicFighterRecord | None:
    """Map one listing row onto a :class:`BasicFighterRecord`.

    Returns ``None`` for rows that are too short or carry no name; those are
    header/spacer rows and not errors.
    """
    cells = row.cells
    if len(cells) < MIN_LIST_CELLS:
        return None

    first_name = clean_text(cells[0])
    if not first_name:
        return None

    last_name = clean_text(cells[1]) or ""
    weight = weight_to_metric(cells[4])

    return BasicFighterRecord(
        name=f"{first_name} {last_name}".strip(),
        nickname=clean_text(cells[2]),
        weight_class=classify(weight),
        height=height_to_metric(cells[3]),
        weight=weight,
        reach=reach_to_metric(cells[5]),
        stance=clean_text(cells[6]),
        wins=_parse_count(cells[7]),
        losses=_parse_count(cells[8]),
        draws=_parse_count(cells[9]),
        is_active=True,
        source_url=absolute_url(row.detail_url, base_url),
    )


def parse_fighter_list(
    response: Selector, *, base_url: str | None = None
) -> list[BasicFighterRecord]:
    fighters: list[BasicFighterRecord] = []
    for row in extract_primary_rows(response):
        fighter = parse_fighter_list_row(row, base_url=base_url)
        if fighter is not None:
            fighters.append(fighter)
    return fighters


def _parse_result(text: str | None) -> FightResult:
    lowered = (text or "").lower()
    if "win" in lowered:
        return FightResult.WIN
    if "loss" in lowered:
        return FightResult.LOSS
    if "draw" in lowered:
        return FightResult.DRAW
    return FightResult.NC


def parse_fight_history_rows(
    response: Selector, *, base_url: str | None = None
) -> list[FightRecord]:
    """Parse the fight table of a fighter detail page, newest fight first."""

    def _extract_opponent(fighter_cell: Selector) -> str | None:
        # The cell lists the page owner first and the opponent second.
        names = [clean_text(name) for name in fighter_cell.css("a::text").getall()]
        names = [name for name in names if name]
        if len(names) >= 2:
            return names[1]
        return names[0] if names else None

    def _extract_event_date(event_cell: Selector) -> str:
        date_texts = event_cell.css("p:nth-child(2)::text").getall()
        if not date_texts:
            date_texts = event_cell.css(".b-fight-details__table-text::text").getall()
        cleaned_parts = [clean_text(t) for t in date_texts if clean_text(t)]
        return parse_date(" ".join(cleaned_parts)) or ""

    fights: list[FightRecord] = []
    for row in response.css("tr.b-fight-details__table-row"):
        if row.css("th"):
            continue
        cells = row.css("td.b-fight-details__table-col")
        if len(cells) < MIN_FIGHT_CELLS:
            continue

        opponent = _extract_opponent(cells[1])
        if not opponent:
            continue

        event_cell = cells[6]
        event = clean_text(event_cell.css("a::text").get())
        method_cell, round_cell, time_cell = (_cell_at(cells, index) for index in (7, 8, 9))
        method = _cell_text(method_cell) if method_cell is not None else ""

        is_title = (
            "title" in method.lower()
            or "title" in (event or "").lower()
            or bool(event_cell.css("img[src*='belt']"))
        )

        fights.append(
            FightRecord(
                opponent=opponent,
                result=_parse_result(_cell_text(cells[0])),
                method=method or "Unknown",
                round=_parse_int(_cell_text(round_cell)) if round_cell is not None else None,
                time=clean_text(_cell_text(time_cell)) if time_cell is not None else None,
                date=_extract_event_date(event_cell),
                event=event or "Unknown Event",
                event_url=absolute_url(event_cell.css("a::attr(href)").get(), base_url),
                is_title=is_title,
            )
        )
    return fights

