"""Shared backend test fixtures for asynchronous database access."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Provide an in-memory SQLite session for integration-style tests."""
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()
