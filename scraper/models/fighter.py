from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class WeightClass(str, Enum):
    """The eight divisions a fighter can be bucketed into."""

    FLYWEIGHT = "FLYWEIGHT"
    BANTAMWEIGHT = "BANTAMWEIGHT"
    FEATHERWEIGHT = "FEATHERWEIGHT"
    LIGHTWEIGHT = "LIGHTWEIGHT"
    WELTERWEIGHT = "WELTERWEIGHT"
    MIDDLEWEIGHT = "MIDDLEWEIGHT"
    LIGHT_HEAVYWEIGHT = "LIGHT_HEAVYWEIGHT"
    HEAVYWEIGHT = "HEAVYWEIGHT"


class FightResult(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    DRAW = "DRAW"
    NC = "NC"


class BasicFighterRecord(BaseModel):
    """Fighter data taken from the stats listing (primary source).

    Measurements are metric: centimetres for height/reach, kilograms for weight.
    """

    name: str = Field(min_length=1)
    nickname: str | None = None
    weight_class: WeightClass
    height: int | None = Field(None, ge=0, description="Height in centimetres")
    weight: int | None = Field(None, ge=0, description="Weight in kilograms")
    reach: int | None = Field(None, ge=0, description="Reach in centimetres")
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    draws: int = Field(0, ge=0)
    is_active: bool = True
    stance: str | None = None
    nationality: str | None = None
    source_url: str | None = Field(
        None, description="Primary-source fighter detail page"
    )

    @field_validator("nickname", "stance", "nationality", "source_url", mode="before")
    @classmethod
    def _empty_string_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class EnrichmentRecord(BaseModel):
    """Biographical fields attached from the secondary source.

    None of these names exist on :class:`BasicFighterRecord`, so merging can
    only ever add data to a primary record.
    """

    photo_url: str | None = None
    biography: str | None = None
    birth_place: str | None = None
    birth_date: str | None = None
    relevance_confirmed: bool = False

    def is_empty(self) -> bool:
        return not any(
            (self.photo_url, self.biography, self.birth_place, self.birth_date)
        )


class DataQuality(BaseModel):
    primary_source_present: bool = True
    secondary_source_present: bool = False
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))


class EnrichedFighterRecord(BasicFighterRecord):
    photo_url: str | None = None
    biography: str | None = None
    birth_place: str | None = None
    birth_date: str | None = None
    data_quality: DataQuality = Field(default_factory=DataQuality)


class FightRecord(BaseModel):
    opponent: str
    result: FightResult
    method: str = "Unknown"
    round: int | None = None
    time: str | None = None
    date: str = ""
    event: str = "Unknown Event"
    event_url: str | None = None
    is_title: bool = False

    @field_validator("round", mode="before")
    @classmethod
    def _parse_round(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return None
        return parsed or None


class FightHistorySummary(BaseModel):
    """Aggregate view over a newest-first list of fights."""

    total_fights: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_rate: int = Field(0, description="Percentage of fights won (0-100)")
    finish_rate: int = Field(0, description="Percentage of fights finished (0-100)")
    title_fights: int = 0
    method_breakdown: dict[str, int] = Field(default_factory=dict)
    recent_form: str = Field("", description="Result initials of the five newest fights")
