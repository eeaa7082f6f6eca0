"""Public holidays: fixed national dates plus Easter-based movable feasts.

Everything here is pure and derived from the year alone, so results are
cached per year.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import FrozenSet, List, Optional

from ..common.datetime_utils import year_bounds
from ..core.constants import FIXED_HOLIDAYS, MOVABLE_HOLIDAYS


@dataclass(frozen=True)
class Holiday:
    day: date
    name: str
    movable: bool = False


def easter_sunday(year: int) -> Optional[date]:
    """Easter Sunday (anonymous Gregorian algorithm), or None if no valid date results."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = (h + l - 7 * m + 114) % 31 + 1
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _movable_holidays(year: int) -> List[Holiday]:
    easter = easter_sunday(year)
    if easter is None:
        return []

    out: List[Holiday] = []
    for offset, name in MOVABLE_HOLIDAYS:
        try:
            out.append(Holiday(day=easter + timedelta(days=offset), name=name, movable=True))
        except OverflowError:
            continue
    return out


@lru_cache(maxsize=64)
def _events(year: int) -> tuple:
    year_bounds(year)
    fixed = [Holiday(day=date(year, month, day), name=name) for day, month, name in FIXED_HOLIDAYS]
    events = fixed + _movable_holidays(year)
    events.sort(key=lambda h: (h.day, h.movable))
    return tuple(events)


def holiday_events_for_year(year: int) -> List[Holiday]:
    """Named holidays for the year, sorted by date (feeds the calendar UI)."""
    return list(_events(int(year)))


def holidays_for_year(year: int) -> FrozenSet[date]:
    return frozenset(h.day for h in _events(int(year)))
