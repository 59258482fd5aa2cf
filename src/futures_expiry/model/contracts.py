from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from dateutil.relativedelta import relativedelta

from ..errors import InvalidDeliveryMonth
from ..utils.business_days import days_in_month, last_day_of_month
from ..utils.market import month_code_for, next_cycle_month, two_digit_year

_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:-(\d{1,2}))?\s*$")


@dataclass(frozen=True)
class ContractIdentifier:
    """Registry key for one futures product: root symbol, market and instrument type."""

    root: str  # e.g., "ES"
    market: str  # e.g., "cme"
    security_type: str = "future"

    def __post_init__(self) -> None:
        root = str(self.root or "").strip().upper()
        market = str(self.market or "").strip().lower()
        if not root or not market:
            raise ValueError(f"ContractIdentifier needs a root and a market, got {self.root!r}/{self.market!r}")
        object.__setattr__(self, "root", root)
        object.__setattr__(self, "market", market)
        object.__setattr__(self, "security_type", str(self.security_type).strip().lower())

    def __str__(self) -> str:
        return f"{self.root}.{self.market}"


@dataclass(frozen=True, order=True)
class DeliveryMonth:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not isinstance(self.year, int) or not isinstance(self.month, int):
            raise InvalidDeliveryMonth(f"year and month must be integers, got {self.year!r}/{self.month!r}")
        if not 1 <= self.year <= 9999:
            raise InvalidDeliveryMonth(f"year out of range: {self.year}")
        if not 1 <= self.month <= 12:
            raise InvalidDeliveryMonth(f"month out of range: {self.month}")

    @classmethod
    def of(cls, value: Any) -> DeliveryMonth:
        """
        Normalize a date, datetime, "YYYY-MM[-DD]" string or (year, month) pair.
        Day-of-month and time of day are discarded.
        """
        if isinstance(value, DeliveryMonth):
            return value
        if isinstance(value, (date, datetime)):
            return cls(value.year, value.month)
        if isinstance(value, str):
            m = _MONTH_RE.match(value)
            if not m:
                raise InvalidDeliveryMonth(f"expected YYYY-MM, got {value!r}")
            dm = cls(int(m.group(1)), int(m.group(2)))
            if m.group(3) is not None and not 1 <= int(m.group(3)) <= days_in_month(dm.year, dm.month):
                raise InvalidDeliveryMonth(f"no day {m.group(3)} in {dm}, got {value!r}")
            return dm
        if isinstance(value, tuple) and len(value) == 2:
            return cls(*value)
        raise InvalidDeliveryMonth(f"cannot interpret {value!r} as a delivery month")

    def add_months(self, n: int) -> DeliveryMonth:
        d = self.first_day() + relativedelta(months=n)
        return DeliveryMonth(d.year, d.month)

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def last_day(self) -> date:
        return last_day_of_month(self.year, self.month)

    def next_in_cycle(self, allowed: Iterable[int]) -> DeliveryMonth:
        y, m = next_cycle_month(self.year, self.month, allowed)
        return DeliveryMonth(y, m)

    @property
    def code(self) -> str:
        """Futures month letter plus YY, e.g. "H24"."""
        return f"{month_code_for(self.month)}{two_digit_year(self.year)}"

    def ticker(self, root: str) -> str:
        return f"{str(root).strip().upper()}{self.code}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class ExpirationTimestamp:
    """
    Final trading date plus an optional time of day.

    Times are exchange-local wall clock and naive: no timezone conversion is applied.
    """

    date: date
    time_of_day: timedelta | None = None

    def to_datetime(self) -> datetime:
        base = datetime(self.date.year, self.date.month, self.date.day)
        return base + self.time_of_day if self.time_of_day is not None else base

    def __str__(self) -> str:
        if self.time_of_day is None:
            return self.date.isoformat()
        return self.to_datetime().isoformat(sep=" ", timespec="minutes")
