"""Builders for fake stats-listing pages and biography payloads."""

from __future__ import annotations

from typing import Any

import httpx
from scrapy.http import HtmlResponse

LISTING_URL = "http://www.ufcstats.com/statistics/fighters"
JON_JONES_URL = "http://www.ufcstats.com/fighter-details/07f72a2a7591b409"
JON_JONES_CELLS = ["Jon", "Jones", "Bones", "6' 4\"", "205 lbs.", "84\"", "Orthodox", "26", "1", "0"]


def listing_row(cells: list[str], detail_url: str | None = None) -> str:
    tds = []
    for index, cell in enumerate(cells):
        if index == 0 and detail_url:
            tds.append(f'<td class="b-statistics__table-col"><a href="{detail_url}" class="b-link">{cell}</a></td>')
        else:
            tds.append(f'<td class="b-statistics__table-col">{cell}</td>')
    return f'<tr class="b-statistics__table-row">{"".join(tds)}</tr>'


def listing_page(*rows: str) -> str:
    header = (
        '<tr class="b-statistics__table-row">'
        "<th>First</th><th>Last</th><th>Nickname</th><th>Ht.</th><th>Wt.</th>"
        "<th>Reach</th><th>Stance</th><th>W</th><th>L</th><th>D</th></tr>"
    )
    return (
        '<html><body><table class="b-statistics__table"><tbody>'
        f'{header}<tr class="b-statistics__table-row"><td class="b-statistics__table-col_type_clear"></td></tr>'
        f"{''.join(rows)}</tbody></table></body></html>"
    )


def fighter_name_cells(first: str, last: str, weight: str = "170 lbs.") -> list[str]:
    return [first, last, "", "5' 11\"", weight, "74\"", "Orthodox", "10", "2", "0"]


def html_response(body: str, url: str = JON_JONES_URL) -> HtmlResponse:
    return HtmlResponse(url=url, body=body.encode("utf-8"), encoding="utf-8")


def summary_payload(
    extract: str,
    *,
    thumbnail: str | None = None,
    original: str | None = None,
    title: str = "Jon Jones",
) -> dict[str, Any]:
    payload: dict[str, Any] = {"title": title, "extract": extract}
    if thumbnail:
        payload["thumbnail"] = {"source": thumbnail}
    if original:
        payload["originalimage"] = {"source": original}
    return payload


def html(body: str) -> httpx.Response:
    return httpx.Response(200, text=body, headers={"content-type": "text/html; charset=utf-8"})


def not_found() -> httpx.Response:
    return httpx.Response(404, json={"title": "Not found."})
