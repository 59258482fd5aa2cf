from __future__ import annotations

import logging
from typing import Any

from ..io_adapters.publication_loader import load_builtin_publication_tables
from ..model.calendars import HolidayCalendar
from ..model.contracts import ContractIdentifier, DeliveryMonth, ExpirationTimestamp
from ..model.publications import PublicationTables
from .context import RuleContext
from .products import default_registry
from .registry import ExpiryRegistry

logger = logging.getLogger(__name__)


class ExpiryEngine:
    """
    Resolve (contract, delivery month) to a final trading timestamp.

    The engine holds no mutable state; the registry, calendar and publication
    tables are injected snapshots, so one engine can serve any number of threads.
    """

    def __init__(
        self,
        registry: ExpiryRegistry,
        calendar: HolidayCalendar,
        publications: PublicationTables | None = None,
    ) -> None:
        self.registry = registry
        self.calendar = calendar
        self.publications = publications if publications is not None else PublicationTables()

    def resolve_expiry(self, contract: ContractIdentifier, month: Any) -> ExpirationTimestamp:
        dm = DeliveryMonth.of(month)
        rule = self.registry.resolve(contract)
        ctx = RuleContext(contract=contract, calendar=self.calendar, publications=self.publications)
        ts = rule.evaluate(dm, ctx)
        logger.debug(
            "expiry_resolved",
            extra={"contract": str(contract), "month": str(dm), "expiry": str(ts)},
        )
        return ts


def resolve_expiry(
    contract: ContractIdentifier,
    month: Any,
    calendar: HolidayCalendar,
    publications: PublicationTables | None = None,
    registry: ExpiryRegistry | None = None,
) -> ExpirationTimestamp:
    """One-shot resolution against the built-in product table and publication data."""
    engine = ExpiryEngine(
        registry=registry if registry is not None else default_registry(),
        calendar=calendar,
        publications=publications if publications is not None else load_builtin_publication_tables(),
    )
    return engine.resolve_expiry(contract, month)
