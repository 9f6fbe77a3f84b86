"""Numeric normalization helpers.

The generator never aborts on a single bad number: malformed or non-finite
values collapse to a default instead of propagating through the plan.
"""

import math


def safe_num(value: object, default: float = 0.0) -> float:
    """Coerce a value to a finite float.

    Args:
        value: Any value (number, numeric string, None, ...)
        default: Value returned when coercion fails or the result is not finite

    Returns:
        Finite float
    """
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def round_distance(value: object) -> float:
    """Round a distance to one decimal, clamping to non-negative."""
    return round(max(0.0, safe_num(value)), 1)


def compute_total_load(run_load: object, cross_train_load: object) -> float:
    """Total load is always the sum of its two finite parts."""
    return safe_num(run_load) + safe_num(cross_train_load)
