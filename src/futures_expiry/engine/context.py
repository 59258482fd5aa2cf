from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from ..model.calendars import ANY_PRODUCT, HolidayCalendar
from ..model.contracts import ContractIdentifier, DeliveryMonth
from ..model.publications import PublicationTable, PublicationTables
from ..utils.business_days import good_friday

# ---------------------- holiday sources ----------------------
#
# Each rule names where its non-business days come from. Products that look
# alike do not always use the same source, so the choice stays per rule.


@dataclass(frozen=True)
class ExchangeHolidays:
    """The contract's own (market, root) calendar from the calendar collaborator."""

    def resolve(self, ctx: RuleContext, month: DeliveryMonth) -> frozenset[date]:
        return ctx.calendar.get_holidays(ctx.contract.market, ctx.contract.root)


@dataclass(frozen=True)
class CountryHolidays:
    """A country-wide calendar, stored by the collaborator under (country, "*")."""

    country: str

    def resolve(self, ctx: RuleContext, month: DeliveryMonth) -> frozenset[date]:
        return ctx.calendar.get_holidays(self.country, ANY_PRODUCT)


@dataclass(frozen=True)
class GoodFridayHolidays:
    """Only Good Friday of the evaluated year."""

    def resolve(self, ctx: RuleContext, month: DeliveryMonth) -> frozenset[date]:
        return frozenset({good_friday(month.year)})


@dataclass(frozen=True)
class FixedHolidays:
    dates: frozenset[date] = field(default_factory=frozenset)

    def resolve(self, ctx: RuleContext, month: DeliveryMonth) -> frozenset[date]:
        return frozenset(self.dates)


HolidaySource = ExchangeHolidays | CountryHolidays | GoodFridayHolidays | FixedHolidays

EXCHANGE = ExchangeHolidays()
US = CountryHolidays("usa")
GOOD_FRIDAY = GoodFridayHolidays()


# ---------------------- evaluation context ----------------------


@dataclass(frozen=True)
class RuleContext:
    """Collaborators a rule may consult while computing one expiry."""

    contract: ContractIdentifier
    calendar: HolidayCalendar
    publications: PublicationTables = field(default_factory=PublicationTables)

    def holidays(self, sources: Iterable[HolidaySource], month: DeliveryMonth) -> frozenset[date]:
        """Union of every source's holidays."""
        out: set[date] = set()
        for src in sources:
            out.update(src.resolve(self, month))
        return frozenset(out)

    def publication(self, name: str) -> PublicationTable:
        return self.publications.table(name)
