"""Record-store sink for enrichment batches."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from backend.db.connection import create_tables, get_engine, get_session_factory
from backend.db.repositories import FighterRepository
from scraper.models.fighter import EnrichedFighterRecord

logger = logging.getLogger(__name__)


class FighterStoreSink:
    """Replace fighters by name in the record store, in one transaction."""

    def __init__(self, session_factory: sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory

    async def save(self, records: Sequence[EnrichedFighterRecord]) -> None:
        session_factory = self._session_factory
        if session_factory is None:
            await create_tables(get_engine())
            session_factory = get_session_factory()

        async with session_factory() as session:
            try:
                stored = await FighterRepository(session).replace_many(records)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        logger.info("Stored %d fighters in the record store", stored)
