from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import yaml

from futures_expiry.model.calendars import StaticHolidayCalendar


def _to_date(v: object, where: str) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return date.fromisoformat(str(v).strip())
    except ValueError:
        raise ValueError(f"{where}: expected YYYY-MM-DD, got {v!r}") from None


def load_holiday_calendar(path: Path) -> StaticHolidayCalendar:
    """
    Load a holiday snapshot YAML into a StaticHolidayCalendar.

    Layout:
      calendars:
        usa:            # country-wide calendars live under product "*"
          "*": [2024-01-01, ...]
        cme:
          "*": [...]    # exchange-wide
          BTC: [...]    # product-specific
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Invalid holidays YAML: expected a mapping")

    cal_raw = data.get("calendars") or {}
    if not isinstance(cal_raw, dict):
        raise ValueError("holidays.calendars must be a mapping")

    entries: dict[tuple[str, str], list[date]] = {}
    for exchange, products in cal_raw.items():
        if not isinstance(products, dict):
            raise ValueError(f"calendars.{exchange} must be a mapping of product -> dates")
        for product, days in products.items():
            where = f"calendars.{exchange}.{product}"
            if days is None:
                days = []
            if not isinstance(days, list):
                raise ValueError(f"{where} must be a list of dates")
            entries[(str(exchange), str(product))] = [_to_date(d, where) for d in days]

    return StaticHolidayCalendar(entries)
