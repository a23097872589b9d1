# camp_scheduling/utils/calendar_utils.py
"""
Date and time helpers shared by the schedule overlay and the slot ledger.

Days of week follow the stored convention 0=Sunday .. 6=Saturday.
"""

from datetime import date, datetime, time, timedelta


def day_of_week(value: date) -> int:
    """Weekday of `value` with Sunday as 0."""
    return value.isoweekday() % 7


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def duration_minutes(start_time: time, end_time: time) -> int:
    """Length of a same-day window in whole minutes; <= 0 if invalid."""
    return minutes_of_day(end_time) - minutes_of_day(start_time)


def add_minutes(start_time: time, minutes: int) -> time:
    """Shift a time of day forward; the result must stay within the same day."""
    shifted = datetime.combine(date.min, start_time) + timedelta(minutes=minutes)
    if shifted.date() != date.min:
        raise ValueError(f"{start_time} + {minutes} minutes crosses midnight")
    return shifted.time()


def date_range(start: date, end: date):
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
