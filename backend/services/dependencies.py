"""FastAPI dependency wiring for backend services.

Keeping the factories here leaves repositories free of web-layer concerns so
CLI scripts can reuse them directly.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.db.connection import get_db
from backend.db.repositories import FighterRepository


def get_fighter_repository(session: AsyncSession = Depends(get_db)) -> FighterRepository:
    """Provide a :class:`FighterRepository` bound to the request session."""

    return FighterRepository(session)


__all__ = ["get_fighter_repository"]
