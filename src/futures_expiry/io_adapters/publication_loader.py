from __future__ import annotations

from datetime import date, datetime
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from futures_expiry.model.contracts import DeliveryMonth
from futures_expiry.model.publications import PublicationTable, PublicationTables

_BUILTIN_PACKAGE = "futures_expiry"
_BUILTIN_FILE = ("data", "publications.yaml")


def _to_date(v: Any, where: str) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return date.fromisoformat(str(v).strip())
    except ValueError:
        raise ValueError(f"{where}: expected YYYY-MM-DD, got {v!r}") from None


def parse_publication_tables(data: Any) -> PublicationTables:
    """Turn a parsed publications YAML document into typed tables."""
    if not isinstance(data, dict):
        raise ValueError("Invalid publications YAML: expected a mapping")

    tables_raw = data.get("tables") or {}
    if not isinstance(tables_raw, dict):
        raise ValueError("publications.tables must be a mapping")

    tables: dict[str, PublicationTable] = {}
    for name, row in tables_raw.items():
        if not isinstance(row, dict):
            raise ValueError(f"tables.{name} must be a mapping")
        dates_raw = row.get("dates") or {}
        if not isinstance(dates_raw, dict):
            raise ValueError(f"tables.{name}.dates must be a mapping")

        entries: dict[DeliveryMonth, date] = {}
        for month, published in dates_raw.items():
            where = f"tables.{name}.dates.{month}"
            try:
                key = DeliveryMonth.of(month if isinstance(month, date) else str(month))
            except ValueError as e:
                raise ValueError(f"{where}: {e}") from None
            entries[key] = _to_date(published, where)

        tables[str(name)] = PublicationTable(
            name=str(name),
            entries=entries,
            description=(str(row["description"]) if row.get("description") else None),
        )

    return PublicationTables(tables)


def load_publication_tables(path: Path) -> PublicationTables:
    """
    Load a publications YAML file (same layout as the packaged data/publications.yaml).
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    return parse_publication_tables(data)


def load_builtin_publication_tables() -> PublicationTables:
    """The curated tables shipped with the package."""
    text = resources.files(_BUILTIN_PACKAGE).joinpath(*_BUILTIN_FILE).read_text(encoding="utf-8")
    return parse_publication_tables(yaml.safe_load(text))
