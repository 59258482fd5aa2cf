from __future__ import annotations

import logging
from datetime import date

import pytest

from futures_expiry.engine.products import default_registry
from futures_expiry.engine.service import ExpiryEngine, resolve_expiry
from futures_expiry.errors import CalendarUnavailable, InvalidDeliveryMonth, UnsupportedContract
from futures_expiry.model.calendars import StaticHolidayCalendar
from futures_expiry.model.contracts import ContractIdentifier, DeliveryMonth

GC = ContractIdentifier("GC", "comex")
CALENDAR = StaticHolidayCalendar({("usa", "*"): [date(2024, 3, 29)], ("comex", "*"): []})


def test_resolve_expiry_convenience() -> None:
    ts = resolve_expiry(GC, "2024-03", CALENDAR)
    assert ts.date == date(2024, 3, 26)
    assert resolve_expiry(GC, date(2024, 3, 9), CALENDAR) == ts
    assert resolve_expiry(GC, DeliveryMonth(2024, 3), CALENDAR, registry=default_registry()) == ts


def test_resolution_is_pure() -> None:
    engine = ExpiryEngine(default_registry(), CALENDAR)
    first = [engine.resolve_expiry(GC, (2024, m)) for m in range(1, 13)]
    second = [engine.resolve_expiry(GC, (2024, m)) for m in range(1, 13)]
    assert first == second
    assert CALENDAR.get_holidays("usa", "*") == frozenset({date(2024, 3, 29)})


def test_errors_propagate() -> None:
    with pytest.raises(UnsupportedContract):
        resolve_expiry(ContractIdentifier("NOPE", "cme"), "2024-03", CALENDAR)
    with pytest.raises(InvalidDeliveryMonth):
        resolve_expiry(GC, "2024-00", CALENDAR)
    with pytest.raises(CalendarUnavailable):
        resolve_expiry(GC, "2024-03", StaticHolidayCalendar())


def test_resolution_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="futures_expiry.engine.service"):
        resolve_expiry(GC, "2024-03", CALENDAR)
    rec = next(r for r in caplog.records if r.getMessage() == "expiry_resolved")
    assert rec.contract == "GC.comex"
    assert rec.month == "2024-03"
