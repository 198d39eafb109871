"""Single-day and multi-day statistics over hourly status logs."""
from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Mapping, Union

from .migration import resolve_log
from .models import MAX_STATUS_SCORE, DayLog, DayStats, RecordingProgress, TrendPoint, WorkStatus

DEFAULT_TREND_DAYS = 7

FULL_SPEED_THRESHOLD = 80
STEADY_THRESHOLD = 50


def _percent(numerator: int, denominator: int) -> int:
    """``round(100 * numerator / denominator)`` rounding halves up."""

    return (200 * numerator + denominator) // (2 * denominator)


def _tally(statuses: Iterable[WorkStatus]) -> Counter:
    return Counter(status for status in statuses if status.is_recorded)


def compute_day_stats(log: DayLog) -> DayStats:
    counts = _tally(log.values())
    total = sum(counts.values())
    if not total:
        return DayStats()
    score_sum = sum(status.score * count for status, count in counts.items())
    return DayStats(
        slacking=counts[WorkStatus.SLACKING],
        normal=counts[WorkStatus.NORMAL],
        focused=counts[WorkStatus.FOCUSED],
        total_recorded=total,
        focus_score=_percent(score_sum, total * MAX_STATUS_SCORE),
    )


def recording_progress(total_recorded: int, active_hours_count: int) -> RecordingProgress:
    """How much of the day's active time has a recorded status."""

    return RecordingProgress(
        percent=_percent(total_recorded, max(active_hours_count, 1)),
        hours_to_record=max(0, active_hours_count - total_recorded),
    )


def focus_level(focus_score: int) -> str:
    if focus_score >= FULL_SPEED_THRESHOLD:
        return "full_speed"
    if focus_score >= STEADY_THRESHOLD:
        return "steady"
    return "low"


def compute_trend(
    store: Mapping[str, Any],
    center_date: Union[date, str],
    window_days: int = DEFAULT_TREND_DAYS,
) -> List[TrendPoint]:
    """Per-day status counts ending at ``center_date``, oldest first.

    Values in ``store`` may be migrated records or raw persisted mappings.
    Dates without a record are reported with zero counts.
    """

    if window_days < 1:
        raise ValueError(f"window_days must be at least 1, got {window_days}")
    if isinstance(center_date, datetime):
        center_date = center_date.date()
    elif not isinstance(center_date, date):
        center_date = date.fromisoformat(center_date)

    series: List[TrendPoint] = []
    for offset in range(window_days - 1, -1, -1):
        key = (center_date - timedelta(days=offset)).isoformat()
        raw = store.get(key)
        counts = _tally(resolve_log(raw, f"for {key} ").log.values()) if raw is not None else Counter()
        series.append(
            TrendPoint(
                date=key,
                slacking=counts[WorkStatus.SLACKING],
                normal=counts[WorkStatus.NORMAL],
                focused=counts[WorkStatus.FOCUSED],
            )
        )
    return series
