from __future__ import annotations

from datetime import date
from typing import Set

from ..common.datetime_utils import clamp_to_year, iter_days
from .holidays import holidays_for_year

SATURDAY = 5


def _holidays_between(start: date, end: date) -> Set[date]:
    # A range may cross a year boundary: union every spanned year.
    days: Set[date] = set()
    for year in range(start.year, end.year + 1):
        days |= holidays_for_year(year)
    return days


def is_working_day(day: date) -> bool:
    return day.weekday() < SATURDAY and day not in holidays_for_year(day.year)


def count_working_days(start: date, end: date) -> int:
    """Working days in [start, end], both ends included.

    A reversed range (start > end) counts as 0.
    """
    if start > end:
        return 0

    holidays = _holidays_between(start, end)
    return sum(1 for d in iter_days(start, end) if d.weekday() < SATURDAY and d not in holidays)


def working_days_in_year(start: date, end: date, year: int) -> int:
    clamped = clamp_to_year(start, end, year)
    if clamped is None:
        return 0
    return count_working_days(*clamped)
