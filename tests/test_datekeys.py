"""Date keys, month lengths, weekday offsets and month navigation."""

from datetime import date

import pytest

from goaltracker.datekeys import (
    YearMonth,
    date_key,
    days_in_month,
    first_weekday_of_month,
    is_date_key,
    parse_date_key,
)


def test_date_key_zero_pads():
    assert date_key(date(2024, 3, 5)) == "2024-03-05"
    assert date_key(date(987, 1, 1)) == "0987-01-01"


def test_parse_date_key():
    assert parse_date_key("2024-03-05") == date(2024, 3, 5)
    for bad in ("2024-02-30", "2024-3-5", "05/03/2024", ""):
        assert not is_date_key(bad)
        with pytest.raises(ValueError):
            parse_date_key(bad)


@pytest.mark.parametrize(
    "ym, expected",
    [
        (YearMonth(2024, 2), 29),
        (YearMonth(2023, 2), 28),
        (YearMonth(1900, 2), 28),
        (YearMonth(2000, 2), 29),
        (YearMonth(2024, 3), 31),
        (YearMonth(2024, 4), 30),
    ],
)
def test_days_in_month(ym, expected):
    assert days_in_month(ym) == expected


def test_first_weekday_is_sunday_based():
    assert first_weekday_of_month(YearMonth(2024, 9)) == 0   # Sunday
    assert first_weekday_of_month(YearMonth(2024, 3)) == 5   # Friday
    assert first_weekday_of_month(YearMonth(2024, 6)) == 6   # Saturday
    assert first_weekday_of_month(YearMonth(2024, 4)) == 1   # Monday


def test_year_month_parse_and_format():
    ym = YearMonth.parse("2024-03")
    assert ym == YearMonth(2024, 3)
    assert str(ym) == "2024-03"
    assert ym.label() == "March 2024"
    assert YearMonth.of(date(2024, 12, 31)) == YearMonth(2024, 12)


@pytest.mark.parametrize("bad", ["2024-13", "2024-00", "March 2024", "2024/03", ""])
def test_year_month_parse_rejects(bad):
    with pytest.raises(ValueError):
        YearMonth.parse(bad)


def test_month_navigation_wraps_years():
    assert YearMonth(2024, 1).previous() == YearMonth(2023, 12)
    assert YearMonth(2024, 12).next() == YearMonth(2025, 1)
    assert YearMonth(2024, 6).next().previous() == YearMonth(2024, 6)
