from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Protocol

from ..model.contracts import DeliveryMonth, ExpirationTimestamp
from ..utils.business_days import roll_to_business_day
from ..utils.market import cycle as cycle_from_codes
from .anchors import Anchor, ShiftBusinessDays
from .context import HolidaySource, RuleContext

BACKWARD = -1
FORWARD = 1


class Rule(Protocol):
    """Anything the registry can hold: a pure (month, context) -> timestamp computation."""

    description: str | None

    def delivery_month(self, month: DeliveryMonth) -> DeliveryMonth: ...

    def evaluate(self, month: DeliveryMonth, ctx: RuleContext) -> ExpirationTimestamp: ...


@dataclass(frozen=True)
class HolidayAdjustment:
    """
    Move the candidate one business day at a time in `direction` while it is a
    weekend day or a holiday in the rule's sources plus this pass's `sources`.
    """

    direction: int = BACKWARD
    sources: tuple[HolidaySource, ...] = ()

    def __post_init__(self) -> None:
        if self.direction not in (BACKWARD, FORWARD):
            raise ValueError(f"direction must be {BACKWARD} or {FORWARD}, got {self.direction}")

    def apply(self, d: date, holidays: frozenset[date]) -> date:
        return roll_to_business_day(d, self.direction, holidays)


@dataclass(frozen=True)
class ExpiryRule:
    """
    Declarative expiry rule:
      cycle filter -> month offset -> anchor -> holiday adjustments -> time of day.

    `holidays` feeds the anchor's business-day arithmetic; each adjustment pass
    adds its own sources on top.
    """

    anchor: Anchor
    cycle: frozenset[int] | None = None
    month_offset: int = 0
    holidays: tuple[HolidaySource, ...] = ()
    adjustments: tuple[HolidayAdjustment, ...] = ()
    time_of_day: timedelta | None = None
    description: str | None = None

    def delivery_month(self, month: DeliveryMonth) -> DeliveryMonth:
        """The contract month actually evaluated once the listing cycle is applied."""
        return month.next_in_cycle(self.cycle) if self.cycle else month

    def evaluate(self, month: DeliveryMonth, ctx: RuleContext) -> ExpirationTimestamp:
        contract_month = self.delivery_month(month)
        anchor_month = contract_month.add_months(self.month_offset)
        holidays = ctx.holidays(self.holidays, contract_month)

        d = self.anchor.select(anchor_month, holidays, ctx)
        for adj in self.adjustments:
            d = adj.apply(d, holidays | ctx.holidays(adj.sources, contract_month))

        return ExpirationTimestamp(d, self.time_of_day)


ExpiryFunction = Callable[[DeliveryMonth, RuleContext], date]


@dataclass(frozen=True)
class FunctionRule:
    """Hand-written rule for products whose termination does not fit the declarative shape."""

    fn: ExpiryFunction
    cycle: frozenset[int] | None = None
    time_of_day: timedelta | None = None
    description: str | None = None

    def delivery_month(self, month: DeliveryMonth) -> DeliveryMonth:
        return month.next_in_cycle(self.cycle) if self.cycle else month

    def evaluate(self, month: DeliveryMonth, ctx: RuleContext) -> ExpirationTimestamp:
        contract_month = self.delivery_month(month)
        return ExpirationTimestamp(self.fn(contract_month, ctx), self.time_of_day)


@dataclass(frozen=True)
class RuleBuilder:
    """
    Fluent, immutable builder; every call returns a new builder.

        RuleBuilder().in_cycle("HMUZ").on(NthWeekday(FRIDAY, 3)).at(13, 30).build()
    """

    _anchor: Anchor | None = None
    _cycle: frozenset[int] | None = None
    _month_offset: int = 0
    _holidays: tuple[HolidaySource, ...] = ()
    _adjustments: tuple[HolidayAdjustment, ...] = ()
    _time_of_day: timedelta | None = None
    _description: str | None = None

    def in_cycle(self, months: str | Iterable[int]) -> RuleBuilder:
        allowed = cycle_from_codes(months) if isinstance(months, str) else frozenset(months)
        return replace(self, _cycle=allowed)

    def months_before(self, n: int) -> RuleBuilder:
        return replace(self, _month_offset=-n)

    def on(self, anchor: Anchor) -> RuleBuilder:
        return replace(self, _anchor=anchor)

    def shift(self, delta: int, roll_first: bool = False) -> RuleBuilder:
        if self._anchor is None:
            raise ValueError("shift() needs an anchor; call on() first")
        return replace(self, _anchor=ShiftBusinessDays(self._anchor, delta, roll_first))

    def using(self, *sources: HolidaySource) -> RuleBuilder:
        return replace(self, _holidays=self._holidays + tuple(sources))

    def adjust_backward(self, *sources: HolidaySource) -> RuleBuilder:
        return replace(self, _adjustments=self._adjustments + (HolidayAdjustment(BACKWARD, tuple(sources)),))

    def adjust_forward(self, *sources: HolidaySource) -> RuleBuilder:
        return replace(self, _adjustments=self._adjustments + (HolidayAdjustment(FORWARD, tuple(sources)),))

    def at(self, hours: int, minutes: int = 0) -> RuleBuilder:
        return replace(self, _time_of_day=timedelta(hours=hours, minutes=minutes))

    def described(self, text: str) -> RuleBuilder:
        return replace(self, _description=text)

    def build(self) -> ExpiryRule:
        if self._anchor is None:
            raise ValueError("an expiry rule needs an anchor")
        return ExpiryRule(
            anchor=self._anchor,
            cycle=self._cycle,
            month_offset=self._month_offset,
            holidays=self._holidays,
            adjustments=self._adjustments,
            time_of_day=self._time_of_day,
            description=self._description,
        )


def rule() -> RuleBuilder:
    return RuleBuilder()
