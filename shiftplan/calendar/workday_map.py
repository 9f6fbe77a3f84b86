"""Workday map helpers.

The plan generator consumes a pre-built mapping of ISO date -> bool. This
module provides the fail-open lookup it uses, a builder that turns shift
events into such a map, and a JSON loader for either shape.
"""

import json
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from loguru import logger

WorkdayMap = dict[str, bool]


def is_workday(workday_map: Mapping[str, bool], day: date) -> bool:
    """Look up a date; a missing entry means "not a workday"."""
    return bool(workday_map.get(day.isoformat(), False))


def _parse_event_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    raise ValueError(f"Unsupported event time: {value!r}")


def build_workday_map(events: Iterable[Mapping[str, Any]]) -> WorkdayMap:
    """Convert shift events into a workday map.

    Every calendar date touched by an event is a workday. The end instant is
    treated as exclusive, so a shift ending exactly at midnight does not
    mark the following day.

    Args:
        events: Mappings with "start" and "end" (datetime, date or ISO string)

    Returns:
        Mapping of ISO date -> True for every touched date

    Raises:
        ValueError: If an event is missing a bound, mixes timezone-aware and
            naive times, or ends before it starts
    """
    workday_map: WorkdayMap = {}

    for event in events:
        if "start" not in event or "end" not in event:
            raise ValueError(f"Event must have 'start' and 'end': {dict(event)}")

        start = _parse_event_time(event["start"])
        end = _parse_event_time(event["end"])
        if (start.tzinfo is None) != (end.tzinfo is None):
            raise ValueError(f"Event mixes timezone-aware and naive times: {event['start']} -> {event['end']}")
        end -= timedelta(microseconds=1)
        if end < start:
            raise ValueError(f"Event ends before it starts: {event['start']} -> {event['end']}")

        day = start.date()
        while day <= end.date():
            workday_map[day.isoformat()] = True
            day += timedelta(days=1)

    logger.debug("Built workday map", workdays=len(workday_map))
    return workday_map


def load_workday_map(path: Path) -> WorkdayMap:
    """Load a workday map from JSON.

    Accepts either an object of ``{"YYYY-MM-DD": bool}`` or a list of
    ``{"start": ..., "end": ...}`` events.

    Raises:
        ValueError: If the file content has neither shape, or a map value is
            not a JSON boolean
    """
    payload = json.loads(path.read_text(encoding="utf-8"))

    if isinstance(payload, dict):
        for key, value in payload.items():
            date.fromisoformat(key)
            if not isinstance(value, bool):
                raise ValueError(f"Workday value for {key} must be true or false, got {value!r}")
        return dict(payload)

    if isinstance(payload, list):
        return build_workday_map(payload)

    raise ValueError(f"Unsupported workday file format in {path}: expected object or list")
