from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from types import MappingProxyType
from typing import Protocol

from ..errors import CalendarUnavailable

ANY_PRODUCT = "*"

Key = tuple[str, str]  # (exchange or country, product or "*")


class HolidayCalendar(Protocol):
    """Market-calendar collaborator: supplies non-trading days per (exchange, product)."""

    def get_holidays(self, exchange: str, product: str) -> frozenset[date]: ...


class StaticHolidayCalendar:
    """
    Immutable in-memory holiday snapshot.

    Lookup order: exact (exchange, product), then the exchange-wide (exchange, "*")
    entry. Anything else raises CalendarUnavailable; a missing calendar is never
    treated as "no holidays".
    """

    def __init__(self, entries: Mapping[Key, Iterable[date]] | None = None) -> None:
        norm: dict[Key, frozenset[date]] = {}
        for (exchange, product), days in (entries or {}).items():
            norm[_key(exchange, product)] = frozenset(days)
        self._entries: Mapping[Key, frozenset[date]] = MappingProxyType(norm)

    def get_holidays(self, exchange: str, product: str) -> frozenset[date]:
        exact = _key(exchange, product)
        if exact in self._entries:
            return self._entries[exact]
        wide = _key(exchange, ANY_PRODUCT)
        if wide in self._entries:
            return self._entries[wide]
        raise CalendarUnavailable(f"No holiday calendar for {exchange}/{product}")

    def keys(self) -> list[Key]:
        return sorted(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _key(exchange: str, product: str) -> Key:
    p = str(product).strip().upper()
    return (str(exchange).strip().lower(), p if p else ANY_PRODUCT)
