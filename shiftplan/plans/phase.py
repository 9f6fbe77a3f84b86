"""Deterministic phase resolution.

Phase is a pure function of where a date falls inside the start->goal
window. Because the position only grows as the date advances, the phase
sequence of a plan never moves backwards.
"""

from datetime import date

from shiftplan.plans.invariants import (
    BUILD_START_PCT,
    PEAK_START_PCT,
    PHASE_QUALITY_CAPS,
    TAPER_START_PCT,
)
from shiftplan.plans.types import PHASE_ORDER, Phase


def plan_position(day: date, start: date, goal: date) -> float:
    """Fraction of the start->goal window elapsed at ``day`` (0 when the window is empty)."""
    total = (goal - start).days
    if total == 0:
        return 0.0
    return (day - start).days / total


def get_phase(day: date, start: date, goal: date) -> Phase:
    """Resolve the training phase for a date.

    Phase determination logic:
    - position < 0.35: BASE
    - position < 0.75: BUILD
    - position < 0.90: PEAK
    - otherwise: TAPER

    Args:
        day: Date being classified
        start: Plan start date
        goal: Goal (event) date

    Returns:
        Phase for the date
    """
    pct = plan_position(day, start, goal)

    if pct < BUILD_START_PCT:
        return Phase.BASE
    if pct < PEAK_START_PCT:
        return Phase.BUILD
    if pct < TAPER_START_PCT:
        return Phase.PEAK
    return Phase.TAPER


def phase_quality_cap(phase: Phase) -> int:
    """Maximum quality days allowed in a 7-day trailing window ending in ``phase``."""
    return PHASE_QUALITY_CAPS[phase]


def phase_rank(phase: Phase) -> int:
    return PHASE_ORDER.index(phase)
