"""Linear load ramp.

The ramp interpolates the target 10-day rolling load between the athlete's
starting load and the peak load over the start->goal window. Run distances
are sized from the weekly share of that target.
"""

from datetime import date

from shiftplan.plans.invariants import WEEKLY_FROM_ROLLING
from shiftplan.utils.numbers import safe_num


def ramp_progress(day: date, start: date, goal: date) -> float:
    """Elapsed fraction of the plan, clamped to [0, 1]."""
    total = max(1, (goal - start).days)
    progress = (day - start).days / total
    return min(1.0, max(0.0, progress))


def target_rolling_load(
    day: date,
    start: date,
    goal: date,
    starting_load: float,
    peak_load: float,
) -> float:
    """Target 10-day rolling load for a date.

    Args:
        day: Date being sized
        start: Plan start date
        goal: Goal date
        starting_load: Rolling load at plan start
        peak_load: Rolling load to reach by the goal date

    Returns:
        ``starting + (peak - starting) * progress``; 0 if the inputs are not finite
    """
    starting = safe_num(starting_load)
    peak = safe_num(peak_load)
    return safe_num(starting + (peak - starting) * ramp_progress(day, start, goal))


def weekly_target_load(rolling_load: float) -> float:
    """Weekly share of a 10-day rolling load."""
    return safe_num(rolling_load) * WEEKLY_FROM_ROLLING
