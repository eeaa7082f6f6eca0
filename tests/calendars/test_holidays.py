from __future__ import annotations

from datetime import date

import pytest

from vacation_system.calendars.holidays import easter_sunday, holiday_events_for_year, holidays_for_year
from vacation_system.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "year,expected",
    [
        (1818, date(1818, 3, 22)),
        (2000, date(2000, 4, 23)),
        (2008, date(2008, 3, 23)),
        (2019, date(2019, 4, 21)),
        (2024, date(2024, 3, 31)),
        (2025, date(2025, 4, 20)),
        (2038, date(2038, 4, 25)),
    ],
)
def test_easter_sunday_known_dates(year, expected):
    assert easter_sunday(year) == expected


def test_easter_always_between_22_march_and_25_april():
    for year in range(1583, 2400):
        easter = easter_sunday(year)
        assert easter is not None
        assert date(year, 3, 22) <= easter <= date(year, 4, 25)
        assert easter.weekday() == 6


def test_movable_holidays_2024():
    days = holidays_for_year(2024)
    assert date(2024, 2, 13) in days  # Carnival
    assert date(2024, 3, 29) in days  # Good Friday
    assert date(2024, 3, 31) in days  # Easter
    assert date(2024, 5, 30) in days  # Corpus Christi


def test_ten_fixed_and_four_movable_events():
    for year in (2023, 2024, 2025, 2038):
        events = holiday_events_for_year(year)
        assert len([e for e in events if not e.movable]) == 10
        assert len([e for e in events if e.movable]) == 4


def test_holiday_set_dedupes_coinciding_dates():
    # Easter 2038 falls on 25 April, a fixed holiday.
    assert len(holidays_for_year(2038)) == 13
    assert len(holidays_for_year(2024)) == 14


def test_fixed_holidays_present_every_year():
    for year in (1999, 2024, 2100):
        days = holidays_for_year(year)
        for month, day in ((1, 1), (4, 25), (5, 1), (6, 10), (8, 15), (10, 5), (11, 1), (12, 1), (12, 8), (12, 25)):
            assert date(year, month, day) in days


def test_events_sorted_and_named():
    events = holiday_events_for_year(2025)
    assert [e.day for e in events] == sorted(e.day for e in events)
    names = {e.name for e in events}
    assert {"Carnival", "Good Friday", "Easter Sunday", "Corpus Christi", "Christmas Day"} <= names


def test_holidays_are_deterministic_and_immutable():
    first = holidays_for_year(2030)
    assert first == holidays_for_year(2030)
    assert isinstance(first, frozenset)


def test_year_out_of_range_rejected():
    with pytest.raises(ValidationError):
        holidays_for_year(0)
