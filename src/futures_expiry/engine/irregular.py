"""
Hand-written expiry functions for products whose termination rule counts under
several conditions at once and does not reduce to anchor + adjustment.
"""

from __future__ import annotations

from datetime import date, timedelta

from ..model.contracts import DeliveryMonth
from ..utils.business_days import (
    FRIDAY,
    THURSDAY,
    WEDNESDAY,
    add_business_days,
    days_in_month,
    is_business_day,
    last_weekday_of_month,
    nth_weekday_of_month,
)
from .context import EXCHANGE, US, RuleContext


def vix_final_settlement(month: DeliveryMonth, ctx: RuleContext) -> date:
    """
    Wednesday 30 days before the third Friday of the following month; one day
    earlier when either that Wednesday or that Friday is a US holiday.
    """
    nxt = month.add_months(1)
    third_friday = nth_weekday_of_month(nxt.year, nxt.month, FRIDAY, 3)
    expiry = third_friday - timedelta(days=30)
    us = ctx.holidays((US,), month)
    if expiry in us or third_friday in us:
        expiry -= timedelta(days=1)
    return expiry


def wednesday_nearest_fifteenth(month: DeliveryMonth, ctx: RuleContext) -> date:
    """
    Wednesday closest to the 15th (earliest wins a tie). When that is not a
    trading day, the next business day.
    """
    wednesdays = [
        date(month.year, month.month, day)
        for day in range(1, days_in_month(month.year, month.month) + 1)
        if date(month.year, month.month, day).weekday() == WEDNESDAY
    ]
    closest = min(wednesdays, key=lambda d: abs(15 - d.day))
    exchange = ctx.holidays((EXCHANGE,), month)
    us = ctx.holidays((US,), month)
    if closest in exchange or not is_business_day(closest, us):
        closest = add_business_days(closest, 1, us)
    return closest


def _preceded_by_holiday(thursday: date, holidays: frozenset[date]) -> bool:
    # the four weekdays before the Thursday
    d = thursday
    seen = 0
    while seen < 4:
        d -= timedelta(days=1)
        if d.weekday() >= 5:
            continue
        seen += 1
        if d in holidays:
            return True
    return False


def _clean_thursday(thursday: date, holidays: frozenset[date]) -> date:
    while not is_business_day(thursday, holidays) or _preceded_by_holiday(thursday, holidays):
        thursday -= timedelta(days=7)
    return thursday


def feeder_cattle_last_trade(month: DeliveryMonth, ctx: RuleContext) -> date:
    """
    Last Thursday of the month (November: the Thursday before Thanksgiving),
    moved back a week at a time while that Thursday or any of the four
    weekdays before it is a holiday.
    """
    us = ctx.holidays((US,), month)
    last_thursday = last_weekday_of_month(month.year, month.month, THURSDAY)
    if month.month == 11:
        return _clean_thursday(last_thursday - timedelta(days=7), us)
    return _clean_thursday(last_thursday, us)


def three_business_days_before_prior_25th(month: DeliveryMonth, ctx: RuleContext) -> date:
    """
    Three business days before the 25th of the prior month; if the 25th is not
    a business day, three business days before the business day preceding it.
    A business day here must clear both the US and the exchange calendars.
    """
    prior = month.add_months(-1)
    d = date(prior.year, prior.month, 25)
    holidays = ctx.holidays((US, EXCHANGE), month)

    counted = 0
    while counted < 3 or not is_business_day(d, holidays):
        if is_business_day(d, holidays):
            counted += 1
        d -= timedelta(days=1)
    return d
