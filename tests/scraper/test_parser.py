from __future__ import annotations

import pytest

try:
    from parsel import Selector  # noqa: F401
    from scrapy.http import HtmlResponse  # noqa: F401
except ModuleNotFoundError as exc:
    pytest.skip(
        f"Optional dependency '{exc.name}' is required for parser tests.",
        allow_module_level=True,
    )

from scraper.models.fighter import FightResult, WeightClass
from scraper.utils import parser
from tests.helpers import (
    JON_JONES_CELLS,
    JON_JONES_URL,
    LISTING_URL,
    html_response,
    listing_page,
    listing_row,
)


def test_parse_fighter_list_row_maps_cells_positionally():
    row = parser.PrimaryRow(cells=tuple(JON_JONES_CELLS), detail_url=JON_JONES_URL)

    record = parser.parse_fighter_list_row(row)

    assert record is not None
    assert record.name == "Jon Jones"
    assert record.nickname == "Bones"
    assert record.height == 193
    assert record.weight == 93
    assert record.reach == 213
    assert record.weight_class is WeightClass.LIGHT_HEAVYWEIGHT
    assert record.stance == "Orthodox"
    assert (record.wins, record.losses, record.draws) == (26, 1, 0)
    assert record.is_active is True
    assert record.source_url == JON_JONES_URL


def test_parse_fighter_list_row_skips_short_or_nameless_rows():
    assert parser.parse_fighter_list_row(parser.PrimaryRow(cells=("Jon", "Jones"))) is None
    nameless = ("", *JON_JONES_CELLS[1:])
    assert parser.parse_fighter_list_row(parser.PrimaryRow(cells=nameless)) is None


def test_parse_fighter_list_row_tolerates_missing_measurements():
    cells = ("Khabib", "", "--", "--", "--", "--", "", "abc", "0", "")
    record = parser.parse_fighter_list_row(parser.PrimaryRow(cells=cells))

    assert record is not None
    assert record.name == "Khabib"
    assert record.nickname is None
    assert record.height is None and record.weight is None and record.reach is None
    assert record.weight_class is WeightClass.WELTERWEIGHT
    assert (record.wins, record.losses, record.draws) == (0, 0, 0)


def test_parse_fighter_list_row_absolutises_relative_detail_urls():
    row = parser.PrimaryRow(cells=tuple(JON_JONES_CELLS), detail_url="/fighter-details/abc")

    record = parser.parse_fighter_list_row(row, base_url="http://www.ufcstats.com")

    assert record is not None
    assert record.source_url == "http://www.ufcstats.com/fighter-details/abc"


def test_parse_fighter_list_skips_header_and_spacer_rows():
    page = listing_page(
        listing_row(JON_JONES_CELLS, JON_JONES_URL),
        listing_row(["Amanda", "Nunes", "The Lioness", "5' 8\"", "135 lbs.", "69\"", "Orthodox", "22", "5", "0"]),
    )

    rows = parser.extract_primary_rows(html_response(page, url=LISTING_URL))
    fighters = parser.parse_fighter_list(html_response(page, url=LISTING_URL))

    assert [len(row.cells) for row in rows] == [1, 10, 10]
    assert rows[1].detail_url == JON_JONES_URL
    assert [fighter.name for fighter in fighters] == ["Jon Jones", "Amanda Nunes"]
    assert fighters[1].weight_class is WeightClass.BANTAMWEIGHT
    assert fighters[1].source_url is None


FIGHT_TABLE = """
<table class="b-fight-details__table">
  <tbody>
    <tr class="b-fight-details__table-row">
      <td class="b-fight-details__table-col"><p><a href="#"><i class="b-flag__text">win</i></a></p></td>
      <td class="b-fight-details__table-col">
        <p><a href="http://www.ufcstats.com/fighter-details/jj">Jon Jones</a></p>
        <p><a href="http://www.ufcstats.com/fighter-details/sm">Stipe Miocic</a></p>
      </td>
      <td class="b-fight-details__table-col"><p>1</p><p>0</p></td>
      <td class="b-fight-details__table-col"><p>30</p><p>10</p></td>
      <td class="b-fight-details__table-col"><p>0</p><p>0</p></td>
      <td class="b-fight-details__table-col"><p>0</p><p>0</p></td>
      <td class="b-fight-details__table-col">
        <p><a href="http://www.ufcstats.com/event-details/309">UFC 309: Jones vs. Miocic</a></p>
        <p>Nov. 16, 2024</p>
        <img src="http://1e49bc5171d173577ecd-1323f4090557a33db01577564f60846c.r80.cf1.rackcdn.com/belt.png">
      </td>
      <td class="b-fight-details__table-col"><p>KO/TKO</p><p>Spinning Back Kick</p></td>
      <td class="b-fight-details__table-col"><p>3</p></td>
      <td class="b-fight-details__table-col"><p>4:29</p></td>
    </tr>
    <tr class="b-fight-details__table-row">
      <td class="b-fight-details__table-col"><p><a href="#"><i class="b-flag__text">nc</i></a></p></td>
      <td class="b-fight-details__table-col">
        <p><a href="http://www.ufcstats.com/fighter-details/jj">Jon Jones</a></p>
        <p><a href="http://www.ufcstats.com/fighter-details/dc">Daniel Cormier</a></p>
      </td>
      <td class="b-fight-details__table-col"><p>1</p></td>
      <td class="b-fight-details__table-col"><p>1</p></td>
      <td class="b-fight-details__table-col"><p>1</p></td>
      <td class="b-fight-details__table-col"><p>1</p></td>
      <td class="b-fight-details__table-col">
        <p><a href="/event-details/214">UFC 214: Cormier vs. Jones 2</a></p>
        <p>Jul. 29, 2017</p>
      </td>
      <td class="b-fight-details__table-col"><p>Overturned</p></td>
      <td class="b-fight-details__table-col"><p>0</p></td>
      <td class="b-fight-details__table-col"><p>3:01</p></td>
    </tr>
  </tbody>
</table>
"""


def test_parse_fight_history_rows_reads_opponent_event_and_method():
    fights = parser.parse_fight_history_rows(
        html_response(FIGHT_TABLE), base_url="http://www.ufcstats.com"
    )

    assert len(fights) == 2
    first, second = fights
    assert first.opponent == "Stipe Miocic"
    assert first.result is FightResult.WIN
    assert first.method == "KO/TKO Spinning Back Kick"
    assert first.round == 3
    assert first.time == "4:29"
    assert first.date == "2024-11-16"
    assert first.event == "UFC 309: Jones vs. Miocic"
    assert first.is_title is True

    assert second.opponent == "Daniel Cormier"
    assert second.result is FightResult.NC
    assert second.round is None
    assert second.event_url == "http://www.ufcstats.com/event-details/214"
    assert second.date == "2017-07-29"
    assert second.is_title is False
