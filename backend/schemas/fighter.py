from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scraper.models.fighter import WeightClass


class FighterBase(BaseModel):
    nickname: str | None = None
    nationality: str | None = None
    height: int | None = Field(None, ge=0, description="Height in centimetres")
    weight: int | None = Field(None, ge=0, description="Weight in kilograms")
    reach: int | None = Field(None, ge=0, description="Reach in centimetres")
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    draws: int = Field(0, ge=0)
    is_active: bool = True
    stance: str | None = None
    photo_url: str | None = None
    biography: str | None = None
    birth_place: str | None = None
    birth_date: str | None = None


class FighterCreate(FighterBase):
    name: str = Field(min_length=1)
    weight_class: WeightClass


_NON_NULLABLE_FIELDS = frozenset(
    {"name", "weight_class", "wins", "losses", "draws", "is_active"}
)


class FighterUpdate(BaseModel):
    """Partial update; only the fields sent by the client are applied."""

    name: str | None = Field(None, min_length=1)
    weight_class: WeightClass | None = None
    nickname: str | None = None
    nationality: str | None = None
    height: int | None = Field(None, ge=0)
    weight: int | None = Field(None, ge=0)
    reach: int | None = Field(None, ge=0)
    wins: int | None = Field(None, ge=0)
    losses: int | None = Field(None, ge=0)
    draws: int | None = Field(None, ge=0)
    is_active: bool | None = None
    stance: str | None = None
    photo_url: str | None = None
    biography: str | None = None
    birth_place: str | None = None
    birth_date: str | None = None

    def changes(self) -> dict[str, Any]:
        values = self.model_dump(mode="json", exclude_unset=True)
        return {
            key: value
            for key, value in values.items()
            if value is not None or key not in _NON_NULLABLE_FIELDS
        }


class FighterResponse(FighterBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    weight_class: WeightClass
    source_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedFightersResponse(BaseModel):
    data: list[FighterResponse]
    pagination: Pagination


class MessageResponse(BaseModel):
    message: str
