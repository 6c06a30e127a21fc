"""Repository package for database access layer."""

from backend.db.repositories.fighter_repository import (
    FighterFilters,
    FighterRepository,
    record_to_columns,
)

__all__ = [
    "FighterFilters",
    "FighterRepository",
    "record_to_columns",
]
