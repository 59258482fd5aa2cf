from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType

from ..errors import CalendarUnavailable
from .contracts import DeliveryMonth

USDA_DAIRY = "usda_dairy"
ENBRIDGE_NOS = "enbridge_nos"


@dataclass(frozen=True)
class PublicationTable:
    """
    Curated contract month -> external publication date (USDA price releases,
    pipeline notices, ...). Not every month is covered; absent months return None.
    """

    name: str
    entries: Mapping[DeliveryMonth, date] = field(default_factory=dict)
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def lookup(self, month: DeliveryMonth) -> date | None:
        return self.entries.get(month)

    def months(self) -> list[DeliveryMonth]:
        return sorted(self.entries)

    def merged(self, other: PublicationTable) -> PublicationTable:
        """Entries from `other` win."""
        return PublicationTable(
            name=self.name,
            entries={**self.entries, **other.entries},
            description=other.description or self.description,
        )

    def __len__(self) -> int:
        return len(self.entries)


class PublicationTables(Mapping[str, PublicationTable]):
    """Named collection of publication tables handed to the engine."""

    def __init__(self, tables: Mapping[str, PublicationTable] | None = None) -> None:
        self._tables: Mapping[str, PublicationTable] = MappingProxyType(dict(tables or {}))

    def __getitem__(self, name: str) -> PublicationTable:
        return self._tables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def table(self, name: str) -> PublicationTable:
        try:
            return self._tables[name]
        except KeyError:
            raise CalendarUnavailable(f"No publication table named {name!r}") from None

    def merged(self, other: PublicationTables) -> PublicationTables:
        out = dict(self._tables)
        for name, tbl in other.items():
            out[name] = out[name].merged(tbl) if name in out else tbl
        return PublicationTables(out)
