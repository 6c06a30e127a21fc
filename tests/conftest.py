"""Shared fixtures: fake HTTP fetchers and an in-memory record store."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.db.models import Base
from scraper.fetcher import DocumentFetcher

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_fetcher() -> Callable[[Handler], DocumentFetcher]:
    """Build a :class:`DocumentFetcher` whose HTTP traffic is answered by ``handler``."""

    def _make(handler: Handler) -> DocumentFetcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
        return DocumentFetcher(client)

    return _make


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Provide a session factory bound to a fresh in-memory SQLite database."""
    pytest.importorskip("aiosqlite")
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", future=True, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()
