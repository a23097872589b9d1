# camp_scheduling/utils/recurrence.py
"""
Recurrence expansion.

Turns a declarative recurrence (date range, pattern type, repeat type,
day-of-week filter) into the ordered list of dates it covers. The same
expansion feeds camp sessions and recurring availability slots.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from camp_scheduling.constants.scheduling import PatternType, RepeatType
from camp_scheduling.utils.calendar_utils import day_of_week

_INTERVAL_DAYS = {
    RepeatType.DAILY: 1,
    RepeatType.WEEKLY: 7,
    RepeatType.BIWEEKLY: 14,
}


def interval_days(repeat_type: Optional[str]) -> int:
    """Step between occurrences; unknown repeat types fall back to daily."""
    return _INTERVAL_DAYS.get(repeat_type, 1)


def expand_dates(
    start_date: date,
    end_date: date,
    pattern_type: str,
    repeat_type: Optional[str],
    days_of_week: Optional[Iterable[int]] = None,
) -> List[date]:
    """
    Dates produced by a recurrence, ascending, both ends inclusive.

    specific_days walks the range one day at a time and keeps the dates whose
    weekday is in `days_of_week`. Every other pattern type keeps each visited
    date and advances by the repeat interval. An inverted range yields [].
    """
    dates: List[date] = []
    current = start_date

    if pattern_type == PatternType.SPECIFIC_DAYS:
        wanted = set(days_of_week or [])
        while current <= end_date:
            if day_of_week(current) in wanted:
                dates.append(current)
            current += timedelta(days=1)
        return dates

    step = timedelta(days=interval_days(repeat_type))
    while current <= end_date:
        dates.append(current)
        current += step
    return dates
