from datetime import date

import pytest

from app.engine.month import Month


def test_parse_valid_month():
    month = Month.parse("2024-02")
    assert month == Month(2024, 2)
    assert str(month) == "2024-02"


@pytest.mark.parametrize("value", ["2024-2", "2024/02", "24-02", "2024-13", "2024-00", "", "abcd-ef"])
def test_parse_rejects_malformed(value):
    with pytest.raises(ValueError):
        Month.parse(value)


def test_days_in_month_handles_leap_years():
    assert Month(2024, 2).days == 29
    assert Month(2023, 2).days == 28
    assert Month(2024, 1).days == 31
    assert Month(2024, 4).days == 30


def test_bounds_and_membership():
    month = Month(2024, 3)
    assert month.first_day == date(2024, 3, 1)
    assert month.last_day == date(2024, 3, 31)
    assert date(2024, 3, 15) in month
    assert date(2024, 4, 1) not in month


def test_shift_crosses_year_boundaries():
    assert Month(2024, 1).shift(-1) == Month(2023, 12)
    assert Month(2024, 12).shift(1) == Month(2025, 1)
    assert Month(2024, 6).shift(-12) == Month(2023, 6)


def test_months_are_ordered():
    assert Month(2023, 12) < Month(2024, 1) < Month(2024, 2)
    assert Month.from_date(date(2024, 5, 31)) == Month(2024, 5)
