from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from futures_expiry.utils.market import HMUZ, cycle, month_code_for, next_cycle_month


def test_cycle_from_codes() -> None:
    assert cycle("HMUZ") == frozenset({3, 6, 9, 12})
    assert cycle(" fhk ") == frozenset({1, 3, 5})
    with pytest.raises(ValueError):
        cycle("HAZ")
    with pytest.raises(ValueError):
        cycle("")


def test_month_codes() -> None:
    assert month_code_for(3) == "H"
    assert month_code_for(12) == "Z"
    with pytest.raises(ValueError):
        month_code_for(13)


def test_next_cycle_month() -> None:
    assert next_cycle_month(2024, 3, HMUZ) == (2024, 3)
    assert next_cycle_month(2024, 4, HMUZ) == (2024, 6)
    assert next_cycle_month(2024, 12, {3}) == (2025, 3)
    with pytest.raises(ValueError):
        next_cycle_month(2024, 1, set())
    with pytest.raises(ValueError):
        next_cycle_month(2024, 1, {0, 3})


@given(
    st.integers(min_value=1900, max_value=2100),
    st.integers(min_value=1, max_value=12),
    st.frozensets(st.integers(min_value=1, max_value=12), min_size=1),
)
def test_next_cycle_month_properties(year: int, month: int, allowed: frozenset[int]) -> None:
    y, m = next_cycle_month(year, month, allowed)
    assert m in allowed
    assert (y, m) >= (year, month)
    assert (y * 12 + m) - (year * 12 + month) < 12
    if month in allowed:
        assert (y, m) == (year, month)
