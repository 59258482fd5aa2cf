from __future__ import annotations

from datetime import date, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from futures_expiry.utils.business_days import (
    FRIDAY,
    THURSDAY,
    WEDNESDAY,
    add_business_days,
    good_friday,
    is_business_day,
    last_weekday_of_month,
    nth_business_day,
    nth_last_business_day,
    nth_weekday_of_month,
    roll_to_business_day,
)

_days = st.dates(min_value=date(2000, 1, 1), max_value=date(2040, 12, 31))
_holidays = st.frozensets(_days, max_size=30)


def test_nth_weekday_of_month() -> None:
    assert nth_weekday_of_month(2024, 3, FRIDAY, 3) == date(2024, 3, 15)
    assert nth_weekday_of_month(2024, 3, WEDNESDAY, 1) == date(2024, 3, 6)
    with pytest.raises(ValueError):
        nth_weekday_of_month(2024, 2, FRIDAY, 5)
    with pytest.raises(ValueError):
        nth_weekday_of_month(2024, 2, FRIDAY, 0)


def test_last_weekday_of_month() -> None:
    assert last_weekday_of_month(2024, 11, THURSDAY) == date(2024, 11, 28)
    assert last_weekday_of_month(2024, 3, FRIDAY) == date(2024, 3, 29)


def test_nth_business_days() -> None:
    assert nth_last_business_day(2024, 3, 3) == date(2024, 3, 27)
    assert nth_last_business_day(2024, 3, 3, {date(2024, 3, 27)}) == date(2024, 3, 26)
    assert nth_business_day(2024, 6, 1) == date(2024, 6, 3)
    assert nth_business_day(2024, 1, 1, {date(2024, 1, 1)}) == date(2024, 1, 2)
    with pytest.raises(ValueError):
        nth_business_day(2024, 2, 30)


def test_good_friday() -> None:
    assert good_friday(2024) == date(2024, 3, 29)
    assert good_friday(2022) == date(2022, 4, 15)


def test_add_business_days_skips_weekends_and_holidays() -> None:
    fri = date(2024, 3, 15)
    assert add_business_days(fri, 1) == date(2024, 3, 18)
    assert add_business_days(fri, 1, {date(2024, 3, 18)}) == date(2024, 3, 19)
    assert add_business_days(date(2024, 3, 18), -1) == fri
    # several holiday sets are unioned
    assert add_business_days(fri, 1, {date(2024, 3, 18)}, {date(2024, 3, 19)}) == date(2024, 3, 20)
    assert add_business_days(date(2024, 3, 16), 0) == date(2024, 3, 16)


def test_roll_to_business_day() -> None:
    sat = date(2024, 3, 16)
    assert roll_to_business_day(sat, -1) == date(2024, 3, 15)
    assert roll_to_business_day(sat, 1) == date(2024, 3, 18)
    assert roll_to_business_day(date(2024, 3, 15), -1) == date(2024, 3, 15)
    with pytest.raises(ValueError):
        roll_to_business_day(sat, 0)


@given(_days, _holidays)
def test_roll_backward_lands_on_a_business_day(d: date, holidays: frozenset[date]) -> None:
    out = roll_to_business_day(d, -1, holidays)
    assert out <= d
    assert out.weekday() < 5
    assert out not in holidays


@given(_days, st.integers(min_value=-20, max_value=20).filter(bool), _holidays)
def test_add_business_days_counts_exactly(d: date, delta: int, holidays: frozenset[date]) -> None:
    out = add_business_days(d, delta, holidays)
    assert is_business_day(out, holidays)
    if delta > 0:
        walked = [d + timedelta(days=i) for i in range(1, (out - d).days + 1)]
    else:
        walked = [out + timedelta(days=i) for i in range((d - out).days)]
    assert sum(1 for x in walked if is_business_day(x, holidays)) == abs(delta)
