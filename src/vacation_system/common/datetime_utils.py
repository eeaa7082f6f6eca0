from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Tuple

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)") from None


def utc_now() -> datetime:
    """Current UTC time.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now(timezone.utc)


def year_bounds(year: int) -> Tuple[date, date]:
    if not date.min.year <= int(year) <= date.max.year:
        raise ValidationError(f"Year out of range: {year}")
    return date(int(year), 1, 1), date(int(year), 12, 31)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in [start, end]; 0 when the range is reversed."""
    if start > end:
        return 0
    return (end - start).days + 1


def clamp_to_year(start: date, end: date, year: int) -> Optional[Tuple[date, date]]:
    first, last = year_bounds(year)
    lo = max(start, first)
    hi = min(end, last)
    if lo > hi:
        return None
    return lo, hi


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        if current == date.max:
            break
        current += timedelta(days=1)
