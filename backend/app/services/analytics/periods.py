"""
Time windows, calendar weeks and period selection over activity records.

All timestamps here are naive local wall-clock datetimes.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from app.core.config import settings
from app.services.analytics.adapter import ActivityRecord


def filter_runs(activities: Iterable[ActivityRecord]) -> List[ActivityRecord]:
    """Keep only "Run" activities, in input order."""
    return [a for a in activities if a.is_run]


def week_bucket_of(timestamp: datetime, week_start: Optional[int] = None) -> date:
    """
    Return the first day of the calendar week containing `timestamp`.

    Args:
        timestamp: Local wall-clock datetime
        week_start: Weekday a week starts on (0=Monday ... 6=Sunday).
            Defaults to settings.SCORE_WEEK_START.
    """
    if week_start is None:
        week_start = settings.SCORE_WEEK_START
    offset = (timestamp.weekday() - week_start) % 7
    return (timestamp - timedelta(days=offset)).date()


def lookback_start(reference: datetime, weeks: int) -> datetime:
    return reference - timedelta(weeks=weeks)


def whole_weeks_between(start: datetime, end: datetime) -> int:
    """Number of complete 7-day spans from `start` to `end`."""
    return (end - start).days // 7


def runs_in_window(
    runs: Sequence[ActivityRecord],
    start: datetime,
    end: datetime,
) -> List[ActivityRecord]:
    """Runs whose start time lies in [start, end]."""
    return [r for r in runs if start <= r.start_time <= end]


# ========================================
# Period (year) selection
# ========================================

def activity_year(record: ActivityRecord) -> int:
    return record.start_time.year


def available_years(
    activities: Iterable[ActivityRecord],
    today: Optional[date] = None,
) -> List[int]:
    """
    Distinct local start years, newest first.

    The current year is always included so a period can be selected even
    before the first activity of the year.
    """
    today = today or date.today()
    years = {activity_year(a) for a in activities}
    years.add(today.year)
    return sorted(years, reverse=True)


def select_year(activities: Iterable[ActivityRecord], year: int) -> List[ActivityRecord]:
    """Activities that started (local time) in `year`."""
    return [a for a in activities if activity_year(a) == year]
