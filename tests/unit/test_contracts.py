from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from futures_expiry.errors import InvalidDeliveryMonth
from futures_expiry.model.contracts import ContractIdentifier, DeliveryMonth, ExpirationTimestamp


def test_contract_identifier_normalizes() -> None:
    c = ContractIdentifier(" es ", "CME")
    assert c == ContractIdentifier("ES", "cme")
    assert c.security_type == "future"
    assert str(c) == "ES.cme"
    with pytest.raises(ValueError):
        ContractIdentifier("", "cme")


@pytest.mark.parametrize(
    "value",
    ["2024-03", "2024-3", "2024-03-17", "2024-03-31", date(2024, 3, 17), datetime(2024, 3, 31, 23, 59), (2024, 3)],
)
def test_delivery_month_of(value: object) -> None:
    assert DeliveryMonth.of(value) == DeliveryMonth(2024, 3)


@pytest.mark.parametrize(
    "value",
    ["2024-13", "March 2024", "", "2024-02-45", "2023-02-29", "2024-03-00", (2024, 0), 202403, None],
)
def test_delivery_month_rejects_bad_input(value: object) -> None:
    with pytest.raises(InvalidDeliveryMonth):
        DeliveryMonth.of(value)


def test_delivery_month_arithmetic() -> None:
    jan = DeliveryMonth(2024, 1)
    assert jan.add_months(-1) == DeliveryMonth(2023, 12)
    assert jan.add_months(14) == DeliveryMonth(2025, 3)
    assert DeliveryMonth(2024, 2).last_day() == date(2024, 2, 29)
    assert DeliveryMonth(2024, 4).next_in_cycle({3, 6, 9, 12}) == DeliveryMonth(2024, 6)
    assert DeliveryMonth(2024, 3).code == "H24"
    assert DeliveryMonth(2024, 3).ticker("ES") == "ESH24"
    assert str(jan) == "2024-01"
    assert DeliveryMonth(2023, 12) < jan


def test_expiration_timestamp() -> None:
    ts = ExpirationTimestamp(date(2024, 3, 15), timedelta(hours=13, minutes=30))
    assert ts.to_datetime() == datetime(2024, 3, 15, 13, 30)
    assert ts.to_datetime().tzinfo is None
    assert str(ts) == "2024-03-15 13:30"
    assert str(ExpirationTimestamp(date(2024, 3, 26))) == "2024-03-26"
