from __future__ import annotations

import string

import scrapy

from scraper.config import settings
from scraper.utils.parser import extract_primary_rows, parse_fighter_list_row

LISTING_GROUPS = (*string.ascii_lowercase, "other")


class FightersListSpider(scrapy.Spider):
    """Crawl the alphabetical stats listing and emit one basic record per fighter."""

    name = "fighters_list"
    allowed_domains = ["ufcstats.com"]
    custom_settings = {
        "DOWNLOAD_DELAY": settings.delay_seconds,
        "USER_AGENT": settings.user_agent,
        "AUTOTHROTTLE_ENABLED": True,
    }

    def start_requests(self):
        for group in LISTING_GROUPS:
            yield scrapy.Request(
                f"{settings.fighters_url}?char={group}&page=all",
                callback=self.parse,
                cb_kwargs={"group": group},
                dont_filter=True,
            )

    def parse(self, response: scrapy.http.Response, group: str | None = None):
        parsed = 0
        for row in extract_primary_rows(response):
            record = parse_fighter_list_row(row, base_url=settings.base_url)
            if record is None:
                continue
            parsed += 1
            yield {"item_type": "fighter_basic", **record.model_dump(mode="json")}
        self.logger.info("Listing %s: %d fighters", group or response.url, parsed)

        next_page = response.css("a.b-statistics__paginate-link.next::attr(href)").get()
        if next_page:
            yield response.follow(next_page, callback=self.parse, cb_kwargs={"group": group})
