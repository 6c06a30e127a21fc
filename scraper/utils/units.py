"""Convert imperial measurement strings from the stats listing to metric."""

from __future__ import annotations

import math
import re
from typing import Final

_HEIGHT_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)'\s*(\d+)\"")
_WEIGHT_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)\s*lbs", re.IGNORECASE)
_REACH_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)\"")

CM_PER_INCH: Final[float] = 2.54
KG_PER_POUND: Final[float] = 0.453592


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def height_to_metric(raw: str | None) -> int | None:
    """Convert ``6' 4"`` style heights to whole centimetres."""
    if not raw:
        return None
    match = _HEIGHT_RE.search(raw)
    if not match:
        return None
    feet, inches = int(match.group(1)), int(match.group(2))
    return _round_half_up((feet * 12 + inches) * CM_PER_INCH)


def weight_to_metric(raw: str | None) -> int | None:
    """Convert ``205 lbs.`` style weights to whole kilograms."""
    if not raw:
        return None
    match = _WEIGHT_RE.search(raw)
    if not match:
        return None
    return _round_half_up(int(match.group(1)) * KG_PER_POUND)


def reach_to_metric(raw: str | None) -> int | None:
    """Convert ``84"`` style reach values to whole centimetres."""
    if not raw:
        return None
    match = _REACH_RE.search(raw)
    if not match:
        return None
    return _round_half_up(int(match.group(1)) * CM_PER_INCH)
