"""Persistence for fighter records.

The repository is the only layer that issues SQL for fighters. The enrichment
pipeline uses ``replace_by_name`` / ``export_all``; the REST layer uses the
CRUD and ``find_many`` helpers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.db.models import Fighter
from scraper.models.fighter import EnrichedFighterRecord

_WRITABLE_COLUMNS = frozenset(
    column.key
    for column in Fighter.__table__.columns
    if column.key not in {"id", "created_at", "updated_at"}
)


@dataclass(frozen=True)
class FighterFilters:
    weight_class: str | None = None
    is_active: bool | None = None
    search: str | None = None


def record_to_columns(record: EnrichedFighterRecord) -> dict[str, Any]:
    """Flatten an enriched record into ``Fighter`` column values."""

    payload = record.model_dump(mode="json", exclude={"data_quality"})
    return {key: value for key, value in payload.items() if key in _WRITABLE_COLUMNS}


def _apply_filters(query: Select, filters: FighterFilters | None) -> Select:
    if filters is None:
        return query
    if filters.weight_class:
        query = query.where(Fighter.weight_class == filters.weight_class)
    if filters.is_active is not None:
        query = query.where(Fighter.is_active.is_(filters.is_active))
    if filters.search and filters.search.strip():
        query = query.where(Fighter.name.ilike(f"%{filters.search.strip()}%"))
    return query


class FighterRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, fields: Mapping[str, Any]) -> Fighter:
        """Insert a fighter built from ``fields``; unknown keys are ignored."""

        fighter = Fighter(**{key: value for key, value in fields.items() if key in _WRITABLE_COLUMNS})
        self._session.add(fighter)
        await self._session.flush()
        await self._session.refresh(fighter)
        return fighter

    async def get(self, fighter_id: int) -> Fighter | None:
        return await self._session.get(Fighter, fighter_id)

    async def update(self, fighter_id: int, fields: Mapping[str, Any]) -> Fighter | None:
        """Apply a partial update; returns ``None`` when the fighter does not exist."""

        fighter = await self.get(fighter_id)
        if fighter is None:
            return None
        for key, value in fields.items():
            if key in _WRITABLE_COLUMNS:
                setattr(fighter, key, value)
        await self._session.flush()
        await self._session.refresh(fighter)
        return fighter

    async def delete(self, fighter_id: int) -> bool:
        fighter = await self.get(fighter_id)
        if fighter is None:
            return False
        await self._session.delete(fighter)
        await self._session.flush()
        return True

    async def find_many(
        self,
        filters: FighterFilters | None = None,
        *,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Fighter], int]:
        """Return one page of fighters (newest first) and the filtered total."""

        query = _apply_filters(select(Fighter), filters)
        query = (
            query.order_by(Fighter.created_at.desc(), Fighter.id.desc())
            .offset((max(page, 1) - 1) * limit)
            .limit(limit)
        )
        result = await self._session.execute(query)
        total = await self.count(filters)
        return list(result.scalars().all()), total

    async def count(self, filters: FighterFilters | None = None) -> int:
        query = _apply_filters(select(func.count()).select_from(Fighter), filters)
        result = await self._session.execute(query)
        return int(result.scalar_one())

    async def replace_by_name(self, record: EnrichedFighterRecord) -> Fighter:
        """Drop every stored fighter with ``record.name`` and insert ``record``."""

        await self._session.execute(delete(Fighter).where(Fighter.name == record.name))
        return await self.create(record_to_columns(record))

    async def replace_many(self, records: Iterable[EnrichedFighterRecord]) -> int:
        stored = 0
        for record in records:
            await self.replace_by_name(record)
            stored += 1
        return stored

    async def delete_all(self) -> int:
        result = await self._session.execute(delete(Fighter))
        return result.rowcount or 0

    async def list_missing_photos(self, limit: int | None = None) -> Sequence[Fighter]:
        query = select(Fighter).where(Fighter.photo_url.is_(None)).order_by(Fighter.id)
        if limit:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return result.scalars().all()

    async def export_all(self) -> Sequence[Fighter]:
        result = await self._session.execute(select(Fighter).order_by(Fighter.id))
        return result.scalars().all()
