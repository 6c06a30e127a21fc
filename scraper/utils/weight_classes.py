"""Utility helpers for mapping fighter weights to weight classes."""

from __future__ import annotations

from typing import Final

from scraper.models.fighter import WeightClass

# Returned when the weight is unknown. This is a placeholder carried over from
# the first scraper, not a computed classification.
DEFAULT_WEIGHT_CLASS: Final[WeightClass] = WeightClass.WELTERWEIGHT

# Inclusive upper weight limits (in kilograms) mapped to the associated class.
_WEIGHT_CLASS_BOUNDS: Final[tuple[tuple[float, WeightClass], ...]] = (
    (57, WeightClass.FLYWEIGHT),
    (61, WeightClass.BANTAMWEIGHT),
    (66, WeightClass.FEATHERWEIGHT),
    (70, WeightClass.LIGHTWEIGHT),
    (77, WeightClass.WELTERWEIGHT),
    (84, WeightClass.MIDDLEWEIGHT),
    (93, WeightClass.LIGHT_HEAVYWEIGHT),
)


def classify(weight_kg: float | None) -> WeightClass:
    """Bucket a metric weight into one of the eight weight classes."""
    if not weight_kg:
        return DEFAULT_WEIGHT_CLASS

    for upper_limit, weight_class in _WEIGHT_CLASS_BOUNDS:
        if weight_kg <= upper_limit:
            return weight_class

    return WeightClass.HEAVYWEIGHT
