"""Merge primary and secondary records and score collection completeness."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Final

from pydantic import BaseModel, Field

from scraper.models.fighter import (
    BasicFighterRecord,
    DataQuality,
    EnrichedFighterRecord,
    EnrichmentRecord,
)
from scraper.utils.names import normalize_name

# Report label -> record attribute for every field counted by the quality score.
TRACKED_FIELDS: Final[dict[str, str]] = {
    "photo": "photo_url",
    "biography": "biography",
    "birth_date": "birth_date",
    "height": "height",
    "weight": "weight",
    "reach": "reach",
    "nationality": "nationality",
}
# Fields that put a fighter on the "missing data" list.
CRITICAL_FIELDS: Final[dict[str, str]] = {
    "photo": "photo_url",
    "biography": "biography",
    "height": "height",
    "weight": "weight",
    "nationality": "nationality",
}
MISSING_DATA_LIMIT: Final[int] = 10

_ENRICHMENT_FIELDS: Final[tuple[str, ...]] = ("photo_url", "biography", "birth_place", "birth_date")


def merge_fighter_records(
    basic: BasicFighterRecord,
    enrichment: EnrichmentRecord | None = None,
    *,
    now: datetime | None = None,
) -> EnrichedFighterRecord:
    """Combine a primary record with optional enrichment.

    Primary fields are copied as-is; enrichment only contributes fields the
    primary record does not have.
    """
    payload: dict[str, Any] = basic.model_dump()
    has_enrichment = enrichment is not None and not enrichment.is_empty()
    if has_enrichment:
        for field_name in _ENRICHMENT_FIELDS:
            payload[field_name] = getattr(enrichment, field_name)

    payload["data_quality"] = DataQuality(
        primary_source_present=True,
        secondary_source_present=has_enrichment,
        last_updated=now or datetime.now(UTC),
    )
    return EnrichedFighterRecord.model_validate(payload)


def _get(record: Any, attribute: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(attribute)
    return getattr(record, attribute, None)


def completeness_counts(records: Sequence[Any]) -> dict[str, int]:
    return {
        label: sum(1 for record in records if _get(record, attribute))
        for label, attribute in TRACKED_FIELDS.items()
    }


def calculate_quality_score(records: Sequence[Any]) -> float:
    """Percentage of tracked fields populated across ``records`` (0-100)."""
    if not records:
        return 0.0
    populated = sum(completeness_counts(records).values())
    return populated / (len(records) * len(TRACKED_FIELDS)) * 100


def quality_level(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Very Good"
    if score >= 70:
        return "Good"
    if score >= 60:
        return "Fair"
    if score >= 40:
        return "Poor"
    return "Very Poor"


class MissingDataEntry(BaseModel):
    name: str
    missing: list[str]


class DuplicateEntry(BaseModel):
    name: str
    count: int


class DataQualityReport(BaseModel):
    total_fighters: int
    completeness: dict[str, int] = Field(default_factory=dict)
    quality_score: int = Field(0, description="Rounded completeness percentage (0-100)")
    quality_level: str = "Very Poor"
    missing_data_fighters: list[MissingDataEntry] = Field(default_factory=list)
    duplicates: list[DuplicateEntry] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    def percentage(self, label: str) -> float:
        if not self.total_fighters:
            return 0.0
        return self.completeness.get(label, 0) / self.total_fighters * 100


def _missing_fields(record: Any) -> list[str]:
    return [label for label, attribute in CRITICAL_FIELDS.items() if not _get(record, attribute)]


def _find_duplicates(records: Iterable[Any]) -> list[DuplicateEntry]:
    counts: Counter[str] = Counter()
    display_names: dict[str, str] = {}
    for record in records:
        name = _get(record, "name") or ""
        key = normalize_name(name)
        counts[key] += 1
        display_names.setdefault(key, name)
    return [
        DuplicateEntry(name=display_names[key], count=count)
        for key, count in counts.items()
        if count > 1
    ]


def _recommendations(
    completeness: dict[str, int], total: int, duplicate_count: int
) -> list[str]:
    recommendations: list[str] = []

    photo_pct = completeness["photo"] / total * 100
    if photo_pct < 50:
        recommendations.append(
            f"Photo coverage is low ({photo_pct:.1f}%). Consider running the photo backfill."
        )

    bio_pct = completeness["biography"] / total * 100
    if bio_pct < 30:
        recommendations.append(
            f"Biography coverage is low ({bio_pct:.1f}%). Biography lookups need attention."
        )

    physical_pct = (
        (completeness["height"] + completeness["weight"] + completeness["reach"]) / (total * 3) * 100
    )
    if physical_pct < 70:
        recommendations.append(
            f"Physical stats coverage is low ({physical_pct:.1f}%). The stats listing parser may need fixing."
        )

    if duplicate_count:
        recommendations.append(
            f"Found {duplicate_count} duplicate fighter name(s). Consider deduplicating."
        )

    if completeness["photo"] + completeness["biography"] < total * 0.5:
        recommendations.append("Run a large enrichment batch to improve data quality significantly.")

    if not recommendations:
        recommendations.append("Data quality looks good.")
    return recommendations


def build_quality_report(records: Sequence[Any]) -> DataQualityReport:
    """Summarise completeness for a collection of fighter records or dicts."""
    total = len(records)
    if not total:
        return DataQualityReport(total_fighters=0)

    completeness = completeness_counts(records)
    duplicates = _find_duplicates(records)
    score = round(calculate_quality_score(records))
    missing = [
        MissingDataEntry(name=_get(record, "name") or "", missing=fields)
        for record in records
        if (fields := _missing_fields(record))
    ]

    return DataQualityReport(
        total_fighters=total,
        completeness=completeness,
        quality_score=score,
        quality_level=quality_level(score),
        missing_data_fighters=missing[:MISSING_DATA_LIMIT],
        duplicates=duplicates,
        recommendations=_recommendations(completeness, total, len(duplicates)),
    )
