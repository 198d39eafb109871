"""Hour membership checks for inactive time ranges."""
from __future__ import annotations

from typing import Iterable, List

from .models import HOURS_PER_DAY, DayConfig, TimeRange, validate_hour


def in_range(hour: int, time_range: TimeRange) -> bool:
    """Return True when ``hour`` falls inside the enabled, half-open range.

    A range whose start is after its end crosses midnight, e.g. 23 -> 8
    covers 23 and 0..7. A range with ``start == end`` is zero-width and
    never matches.
    """

    hour = validate_hour(hour)
    if not time_range.enabled:
        return False
    if time_range.start > time_range.end:
        return hour >= time_range.start or hour < time_range.end
    return time_range.start <= hour < time_range.end


def in_any_range(hour: int, ranges: Iterable[TimeRange]) -> bool:
    return any(in_range(hour, time_range) for time_range in ranges)


def active_hours(config: DayConfig) -> List[int]:
    """Hours of the day not covered by sleep, nap or out, ascending."""

    ranges = config.ranges()
    return sorted(hour for hour in range(HOURS_PER_DAY) if not in_any_range(hour, ranges))
