"""
Anchor selectors: pick the candidate date inside a month before any holiday
adjustment or time of day is applied.

Every anchor is a frozen value with one method,
``select(month, holidays, ctx) -> date``, where `holidays` is the union of the
rule's holiday sources for the evaluated contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Protocol

from ..model.contracts import DeliveryMonth
from ..utils.business_days import (
    add_business_days,
    days_in_month,
    last_weekday_of_month,
    nth_business_day,
    nth_last_business_day,
    nth_weekday_of_month,
    roll_to_business_day,
)

if TYPE_CHECKING:
    from .context import RuleContext


class Anchor(Protocol):
    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date: ...


@dataclass(frozen=True)
class FixedDay:
    """A calendar day of the month; days past the month end clamp to the last day."""

    day: int

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        if self.day < 1:
            raise ValueError(f"day must be >= 1, got {self.day}")
        return date(month.year, month.month, min(self.day, days_in_month(month.year, month.month)))


@dataclass(frozen=True)
class NthBusinessDay:
    n: int

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        return nth_business_day(month.year, month.month, self.n, holidays)


@dataclass(frozen=True)
class NthLastBusinessDay:
    n: int

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        return nth_last_business_day(month.year, month.month, self.n, holidays)


@dataclass(frozen=True)
class NthWeekday:
    weekday: int  # Mon=0..Sun=6
    n: int

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        return nth_weekday_of_month(month.year, month.month, self.weekday, self.n)


@dataclass(frozen=True)
class LastWeekday:
    weekday: int

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        return last_weekday_of_month(month.year, month.month, self.weekday)


@dataclass(frozen=True)
class PublicationFallback:
    """Assumed publication date when a table has no entry: `day` of (month + month_offset)."""

    month_offset: int
    day: int

    def assumed_date(self, month: DeliveryMonth) -> date:
        m = month.add_months(self.month_offset)
        return date(m.year, m.month, min(self.day, days_in_month(m.year, m.month)))


@dataclass(frozen=True)
class PublicationDate:
    """
    Date announced in an external publication table for the month. Months the
    table does not cover use `fallback`.
    """

    table: str
    fallback: PublicationFallback

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        published = ctx.publication(self.table).lookup(month)
        if published is not None:
            return published
        return self.fallback.assumed_date(month)


@dataclass(frozen=True)
class ShiftBusinessDays:
    """
    `delta` business days from another anchor. With `roll_first`, a base date that
    is not a business day first rolls back to the preceding business day.
    """

    base: Anchor
    delta: int
    roll_first: bool = False

    def select(self, month: DeliveryMonth, holidays: frozenset[date], ctx: RuleContext) -> date:
        d = self.base.select(month, holidays, ctx)
        if self.roll_first:
            d = roll_to_business_day(d, -1, holidays)
        return add_business_days(d, self.delta, holidays)
