"""
Statistics derived from a user's reading sessions.

Everything here is a pure function of the session list and is recomputed on
every read. Sessions may be ORM rows, schema objects or plain mappings with
``date`` and ``minutes``; bad values never raise; they are counted as zero
minutes (and skipped for day-based figures when the date is unusable).
"""
import enum
import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bookshelf.schemas.reading_session import (
    HeatmapCell,
    ReadingHeatmap,
    ReadingSummary,
)


class IntensityBucket(enum.IntEnum):
    NONE = 0  # nothing logged or under 15 minutes
    LIGHT = 1  # 15-29
    MODERATE = 2  # 30-59
    STRONG = 3  # 60-119
    INTENSE = 4  # 120+


# Lower bound (inclusive) of each bucket above NONE, highest first
_BUCKET_FLOORS = (
    (120, IntensityBucket.INTENSE),
    (60, IntensityBucket.STRONG),
    (30, IntensityBucket.MODERATE),
    (15, IntensityBucket.LIGHT),
)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def coerce_minutes(value: Any) -> int:
    """Minutes as a non-negative int; anything unusable counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0


def coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def intensity_bucket(minutes: Any) -> IntensityBucket:
    minutes = coerce_minutes(minutes)
    for floor, bucket in _BUCKET_FLOORS:
        if minutes >= floor:
            return bucket
    return IntensityBucket.NONE


def minutes_by_day(sessions: Iterable[Any]) -> Dict[date, int]:
    totals: Dict[date, int] = defaultdict(int)
    for session in sessions:
        day = coerce_date(_field(session, "date"))
        if day is not None:
            totals[day] += coerce_minutes(_field(session, "minutes"))
    return dict(totals)


def compute_streaks(
    dates: Iterable[Any], today: Optional[date] = None
) -> Tuple[int, int]:
    """Return ``(current_streak, longest_streak)`` in days.

    Dates are walked from the most recent backwards; consecutive days extend
    the running streak and any gap resets it to 1. The current streak is the
    run containing the most recent day, and only counts when that day is
    today or yesterday. Days after ``today`` are ignored.
    """
    today = today or date.today()
    days = sorted(
        {d for d in (coerce_date(value) for value in dates) if d and d <= today},
        reverse=True,
    )
    if not days:
        return 0, 0

    running = longest = 1
    most_recent_run = None
    for newer, older in zip(days, days[1:]):
        if (newer - older).days <= 1:
            running += 1
        else:
            if most_recent_run is None:
                most_recent_run = running
            running = 1
        longest = max(longest, running)

    if most_recent_run is None:
        most_recent_run = running

    current = most_recent_run if (today - days[0]).days <= 1 else 0
    return current, longest


def summarize_sessions(
    sessions: Sequence[Any], today: Optional[date] = None
) -> ReadingSummary:
    sessions = list(sessions)
    total_minutes = sum(coerce_minutes(_field(s, "minutes")) for s in sessions)
    active_days = len(sessions)
    current, longest = compute_streaks((_field(s, "date") for s in sessions), today)

    return ReadingSummary(
        total_minutes=total_minutes,
        total_hours=total_minutes // 60,
        active_days=active_days,
        daily_average=round_half_up(total_minutes / active_days) if active_days else 0,
        current_streak=current,
        longest_streak=longest,
    )


def build_heatmap(
    sessions: Iterable[Any], today: Optional[date] = None, days: int = 365
) -> ReadingHeatmap:
    """One cell per day for the ``days`` days ending ``today``, oldest first."""
    today = today or date.today()
    days = max(days, 1)
    totals = minutes_by_day(sessions)
    start = today - timedelta(days=days - 1)

    cells: List[HeatmapCell] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        minutes = totals.get(day, 0)
        cells.append(
            HeatmapCell(date=day, minutes=minutes, intensity=int(intensity_bucket(minutes)))
        )

    return ReadingHeatmap(start=start, end=today, cells=cells)
