# music_school/services/recurrence.py
"""Weekly recurrence expansion.

Weekdays follow the school's convention: 0 is Sunday and 6 is Saturday.
Python's ``date.weekday()`` counts from Monday, so every computation goes
through ``sunday_based_weekday``.
"""
from datetime import date, timedelta
from typing import Iterable, List, Tuple

DAYS_PER_WEEK = 7
SUNDAY = 0
SATURDAY = 6


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % DAYS_PER_WEEK


def is_valid_weekday(value) -> bool:
    # bool is an int subclass; True must not pass as Monday
    return isinstance(value, int) and not isinstance(value, bool) and SUNDAY <= value <= SATURDAY


def unique_weekdays(weekdays: Iterable[int]) -> List[int]:
    """Drop repeated weekdays, keeping the first position of each."""
    seen = []
    for weekday in weekdays:
        if weekday not in seen:
            seen.append(weekday)
    return seen


def expand(start_date: date, weekdays: Iterable[int], week_count: int) -> List[date]:
    """Dates for ``week_count`` weeks falling on ``weekdays``.

    Week 0 of each weekday is its first date on or after ``start_date``;
    every later week adds seven days. Dates are emitted weekday by weekday,
    in the order the weekdays were given, so each weekday's run is strictly
    increasing while the whole list is not necessarily sorted.
    """
    start_weekday = sunday_based_weekday(start_date)
    dates = []
    for weekday in unique_weekdays(weekdays):
        offset = (weekday - start_weekday + DAYS_PER_WEEK) % DAYS_PER_WEEK
        for week in range(max(week_count, 0)):
            dates.append(start_date + timedelta(days=offset + week * DAYS_PER_WEEK))
    return dates


def week_bounds(anchor: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing ``anchor``."""
    monday = anchor - timedelta(days=anchor.weekday())
    return monday, monday + timedelta(days=DAYS_PER_WEEK - 1)
