from __future__ import annotations

import httpx
import pytest

from scraper.fetcher import FetchError, NotFoundError
from tests.helpers import html


@pytest.mark.asyncio
async def test_fetch_wraps_html_in_scrapy_response(make_fetcher):
    fetcher = make_fetcher(lambda request: html("<html><body><h1>Jon Jones</h1></body></html>"))

    response = await fetcher.fetch("http://www.ufcstats.com/fighter-details/jj")

    assert response.url == "http://www.ufcstats.com/fighter-details/jj"
    assert response.css("h1::text").get() == "Jon Jones"


@pytest.mark.asyncio
async def test_fetch_maps_status_and_transport_errors(make_fetcher):
    statuses = {"/missing": 404, "/broken": 500}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/down":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(statuses[request.url.path])

    fetcher = make_fetcher(handler)

    with pytest.raises(NotFoundError):
        await fetcher.fetch("http://example.com/missing")
    with pytest.raises(FetchError) as server_error:
        await fetcher.fetch("http://example.com/broken")
    with pytest.raises(FetchError) as timeout:
        await fetcher.fetch("http://example.com/down")

    assert server_error.value.reason == "HTTP 500"
    assert timeout.value.url == "http://example.com/down"


@pytest.mark.asyncio
async def test_fetch_json_rejects_non_object_payloads(make_fetcher):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/list":
            return httpx.Response(200, json=[1, 2])
        if request.url.path == "/text":
            return httpx.Response(200, text="not json")
        return httpx.Response(200, json={"ok": True})

    fetcher = make_fetcher(handler)

    assert await fetcher.fetch_json("http://example.com/obj") == {"ok": True}
    with pytest.raises(FetchError, match="unexpected JSON payload"):
        await fetcher.fetch_json("http://example.com/list")
    with pytest.raises(FetchError, match="invalid JSON payload"):
        await fetcher.fetch_json("http://example.com/text")
