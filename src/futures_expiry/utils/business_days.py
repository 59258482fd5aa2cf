from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from dateutil.easter import easter

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

_ONE_DAY = timedelta(days=1)


# ---------------------- helpers ----------------------


def _union(holiday_sets: Iterable[Iterable[date]]) -> frozenset[date]:
    out: set[date] = set()
    for hs in holiday_sets:
        out.update(hs)
    return frozenset(out)


def _require_positive(n: int) -> None:
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))


def is_weekend(d: date) -> bool:
    return d.weekday() >= SATURDAY


def is_business_day(d: date, holidays: Iterable[date] = ()) -> bool:
    """A weekday that is not in `holidays`."""
    if is_weekend(d):
        return False
    return d not in holidays


def good_friday(year: int) -> date:
    """Friday before Easter Sunday (western calendar)."""
    return easter(year) - timedelta(days=2)


# ---------------------- weekday / ordinal primitives ----------------------


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    """
    n-th occurrence of `weekday` (Mon=0..Sun=6) in the month, counting from day 1.
    """
    _require_positive(n)
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    day = 1 + offset + 7 * (n - 1)
    if day > days_in_month(year, month):
        raise ValueError(f"{year}-{month:02d} has fewer than {n} occurrences of weekday {weekday}")
    return date(year, month, day)


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    last = last_day_of_month(year, month)
    return last - timedelta(days=(last.weekday() - weekday) % 7)


def nth_business_day(year: int, month: int, n: int, holidays: Iterable[date] = ()) -> date:
    """n-th business day of the month, counting forward from day 1."""
    _require_positive(n)
    hs = frozenset(holidays)
    d = date(year, month, 1)
    count = 0
    while d.month == month:
        if is_business_day(d, hs):
            count += 1
            if count == n:
                return d
        d += _ONE_DAY
    raise ValueError(f"{year}-{month:02d} has only {count} business days, requested {n}")


def nth_last_business_day(year: int, month: int, n: int, holidays: Iterable[date] = ()) -> date:
    """n-th business day of the month, counting backward from the last day."""
    _require_positive(n)
    hs = frozenset(holidays)
    d = last_day_of_month(year, month)
    count = 0
    while d.month == month:
        if is_business_day(d, hs):
            count += 1
            if count == n:
                return d
        d -= _ONE_DAY
    raise ValueError(f"{year}-{month:02d} has only {count} business days, requested {n}")


# ---------------------- business-day walker ----------------------


def add_business_days(d: date, delta: int, *holiday_sets: Iterable[date]) -> date:
    """
    Move `d` by `delta` business days. The start date itself is never counted.
    A day is skipped if it is a weekend or appears in any of `holiday_sets`.
    """
    if delta == 0:
        return d
    hs = _union(holiday_sets)
    step = _ONE_DAY if delta > 0 else -_ONE_DAY
    remaining = abs(delta)
    while remaining:
        d += step
        if is_business_day(d, hs):
            remaining -= 1
    return d


def roll_to_business_day(d: date, direction: int, *holiday_sets: Iterable[date]) -> date:
    """
    Return `d` when it is a business day, otherwise the first business day
    found walking in `direction` (+1 forward, -1 backward).
    """
    if direction not in (1, -1):
        raise ValueError(f"direction must be +1 or -1, got {direction}")
    hs = _union(holiday_sets)
    while not is_business_day(d, hs):
        d = add_business_days(d, direction, hs)
    return d
