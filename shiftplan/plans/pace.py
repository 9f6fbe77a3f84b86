"""Centralized pace annotation logic.

This module derives display pace ranges from a VO2max estimate. Paces are
opaque annotations attached to run segments; no scheduling rule ever reads
them.

Anchor: a 10K pace regressed from VDOT (VO2max - 3), with threshold and
interval paces offset from it.
"""

import math
from typing import Literal

from pydantic import BaseModel, Field

PaceKind = Literal["easy", "threshold", "interval"]

# Minutes per mile
TEN_K_PACE_INTERCEPT = 13.8
TEN_K_PACE_SLOPE = 0.13
VDOT_OFFSET = 3.0
MIN_PACE_MIN_PER_MILE = 3.0

THRESHOLD_OFFSET = 0.25  # ~15 sec slower than 10K
INTERVAL_OFFSET = -0.15  # ~9 sec faster than 10K
EASY_LOW_OFFSET = 1.0
EASY_HIGH_OFFSET = 1.8
RANGE_HALF_WIDTH = 0.1


class PaceSet(BaseModel):
    """Display pace ranges for each intensity.

    Attributes:
        easy: Easy/long run range, e.g. "9:35 / mi–10:23 / mi"
        threshold: Threshold range
        interval: Interval range
        minutes_per_mile: Midpoint pace of each range, keyed by pace kind
    """

    easy: str
    threshold: str
    interval: str
    minutes_per_mile: dict[str, float] = Field(default_factory=dict)

    def for_kind(self, kind: PaceKind) -> str:
        if kind == "threshold":
            return self.threshold
        if kind == "interval":
            return self.interval
        return self.easy

    def duration_minutes(self, kind: PaceKind, miles: float) -> int | None:
        """Estimated whole minutes to cover ``miles`` at the midpoint pace."""
        pace = self.minutes_per_mile.get(kind)
        if pace is None or miles <= 0:
            return None
        return round(miles * pace)


def format_pace(min_per_mile: float) -> str:
    """Format a pace in minutes per mile as ``M:SS / mi``."""
    minutes = math.floor(min_per_mile)
    seconds = round((min_per_mile - minutes) * 60)
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}:{seconds:02d} / mi"


def format_pace_range(fast: float, slow: float) -> str:
    return f"{format_pace(fast)}–{format_pace(slow)}"


def ten_k_pace_from_vdot(vdot: float) -> float:
    """10K pace in min/mile from VDOT (linear fit against Daniels tables)."""
    return max(MIN_PACE_MIN_PER_MILE, TEN_K_PACE_INTERCEPT - TEN_K_PACE_SLOPE * vdot)


def paces_from_vo2max(vo2max: float) -> PaceSet:
    """Build the display pace set for a VO2max estimate.

    Args:
        vo2max: VO2max in ml/kg/min

    Returns:
        PaceSet with easy, threshold and interval ranges

    Raises:
        ValueError: If vo2max is not a positive finite number
    """
    if not math.isfinite(vo2max) or vo2max <= 0:
        raise ValueError(f"Invalid vo2max: {vo2max}. Must be a positive number")

    ten_k = ten_k_pace_from_vdot(vo2max - VDOT_OFFSET)
    threshold = ten_k + THRESHOLD_OFFSET
    interval = max(MIN_PACE_MIN_PER_MILE, ten_k + INTERVAL_OFFSET)

    return PaceSet(
        easy=format_pace_range(threshold + EASY_LOW_OFFSET, threshold + EASY_HIGH_OFFSET),
        threshold=format_pace_range(threshold - RANGE_HALF_WIDTH, threshold + RANGE_HALF_WIDTH),
        interval=format_pace_range(interval - RANGE_HALF_WIDTH, interval + RANGE_HALF_WIDTH),
        minutes_per_mile={
            "easy": threshold + (EASY_LOW_OFFSET + EASY_HIGH_OFFSET) / 2,
            "threshold": threshold,
            "interval": interval,
        },
    )
