from __future__ import annotations

from collections.abc import Iterable

# CME month codes
MONTH_CODE = {
    1: "F",  # Jan
    2: "G",  # Feb
    3: "H",  # Mar
    4: "J",  # Apr
    5: "K",  # May
    6: "M",  # Jun
    7: "N",  # Jul
    8: "Q",  # Aug
    9: "U",  # Sep
    10: "V",  # Oct
    11: "X",  # Nov
    12: "Z",  # Dec
}

CODE_MONTH = {code: month for month, code in MONTH_CODE.items()}


def month_code_for(month: int) -> str:
    """Map a calendar month number to the futures month letter."""
    try:
        return MONTH_CODE[month]
    except KeyError:
        raise ValueError(f"Unsupported month: {month}") from None


def two_digit_year(year: int) -> str:
    """Return YY (00-99)."""
    return f"{year % 100:02d}"


def cycle(codes: str) -> frozenset[int]:
    """
    Build a delivery cycle from futures month letters, e.g. "HMUZ" -> {3, 6, 9, 12}.
    """
    months: set[int] = set()
    for c in codes.strip().upper():
        if c not in CODE_MONTH:
            raise ValueError(f"Unknown month code {c!r} in cycle {codes!r}")
        months.add(CODE_MONTH[c])
    if not months:
        raise ValueError("A delivery cycle needs at least one month")
    return frozenset(months)


# Listing cycles used by the product table
HMUZ = cycle("HMUZ")
HKNUZ = cycle("HKNUZ")
HKNV = cycle("HKNV")
HKNVZ = cycle("HKNVZ")
FHKNUX = cycle("FHKNUX")
FHKNQUX = cycle("FHKNQUX")
FHKNQUVZ = cycle("FHKNQUVZ")
FHJKQUVX = cycle("FHJKQUVX")
GJMQVZ = cycle("GJMQVZ")
GJKMNQVZ = cycle("GJKMNQVZ")
ALL_MONTHS = frozenset(range(1, 13))


def next_cycle_month(year: int, month: int, allowed: Iterable[int]) -> tuple[int, int]:
    """
    Smallest (year, month) >= the input whose month number is in `allowed`.
    A month already in the cycle is returned unchanged.
    """
    allowed_set = frozenset(allowed)
    if not allowed_set:
        raise ValueError("allowed months must not be empty")
    bad = sorted(m for m in allowed_set if not 1 <= m <= 12)
    if bad:
        raise ValueError(f"allowed months out of range: {bad}")

    y, m = year, month
    for _ in range(12):
        if m in allowed_set:
            return y, m
        m += 1
        if m > 12:
            y, m = y + 1, 1
    # unreachable with a non-empty, in-range cycle
    raise AssertionError(f"no cycle month found from {year}-{month:02d}")
