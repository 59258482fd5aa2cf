from __future__ import annotations

from datetime import date

from futures_expiry.engine.context import RuleContext
from futures_expiry.engine.irregular import (
    feeder_cattle_last_trade,
    three_business_days_before_prior_25th,
    vix_final_settlement,
    wednesday_nearest_fifteenth,
)
from futures_expiry.model.calendars import StaticHolidayCalendar
from futures_expiry.model.contracts import ContractIdentifier, DeliveryMonth


def _ctx(root: str, market: str, us: list[date] | None = None, exchange: list[date] | None = None) -> RuleContext:
    calendar = StaticHolidayCalendar({("usa", "*"): us or [], (market, "*"): exchange or []})
    return RuleContext(contract=ContractIdentifier(root, market), calendar=calendar)


def test_vix_thirty_days_before_next_months_third_friday() -> None:
    assert vix_final_settlement(DeliveryMonth(2024, 4), _ctx("VX", "cfe")) == date(2024, 4, 17)


def test_vix_moves_a_day_earlier_around_a_holiday() -> None:
    # April 2022 third Friday is Good Friday
    ctx = _ctx("VX", "cfe", us=[date(2022, 4, 15)])
    assert vix_final_settlement(DeliveryMonth(2022, 3), ctx) == date(2022, 3, 15)


def test_ibovespa_wednesday_closest_to_the_15th() -> None:
    assert wednesday_nearest_fifteenth(DeliveryMonth(2024, 4), _ctx("IBV", "cme")) == date(2024, 4, 17)
    closed = _ctx("IBV", "cme", exchange=[date(2024, 4, 17)])
    assert wednesday_nearest_fifteenth(DeliveryMonth(2024, 4), closed) == date(2024, 4, 18)


def test_feeder_cattle_last_thursday() -> None:
    assert feeder_cattle_last_trade(DeliveryMonth(2024, 1), _ctx("GF", "cme")) == date(2024, 1, 25)
    # a holiday in the week before pushes it back a week
    ctx = _ctx("GF", "cme", us=[date(2024, 1, 22)])
    assert feeder_cattle_last_trade(DeliveryMonth(2024, 1), ctx) == date(2024, 1, 18)


def test_feeder_cattle_november_skips_thanksgiving() -> None:
    ctx = _ctx("GF", "cme", us=[date(2024, 11, 11), date(2024, 11, 28)])
    assert feeder_cattle_last_trade(DeliveryMonth(2024, 11), ctx) == date(2024, 11, 21)


def test_houston_crude_three_business_days_before_prior_25th() -> None:
    ctx = _ctx("HCL", "nymex")
    assert three_business_days_before_prior_25th(DeliveryMonth(2024, 2), ctx) == date(2024, 1, 22)
    # 25th is a Sunday: counted from the Friday before
    assert three_business_days_before_prior_25th(DeliveryMonth(2024, 3), ctx) == date(2024, 2, 20)
    # exchange holidays count too
    closed = _ctx("HCL", "nymex", exchange=[date(2024, 1, 23)])
    assert three_business_days_before_prior_25th(DeliveryMonth(2024, 2), closed) == date(2024, 1, 19)
