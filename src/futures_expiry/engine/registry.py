from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from ..errors import DuplicateRegistration, UnsupportedContract
from ..model.contracts import ContractIdentifier
from .rules import Rule

logger = logging.getLogger(__name__)


class ExpiryRegistry:
    """
    Read-only ContractIdentifier -> Rule mapping. Built once by RegistryBuilder and
    safe to read from any number of threads.
    """

    def __init__(self, rules: Mapping[ContractIdentifier, Rule]) -> None:
        self._rules: Mapping[ContractIdentifier, Rule] = MappingProxyType(dict(rules))

    def resolve(self, contract: ContractIdentifier) -> Rule:
        try:
            return self._rules[contract]
        except KeyError:
            raise UnsupportedContract(contract) from None

    def contracts(self, market: str | None = None) -> list[ContractIdentifier]:
        m = market.strip().lower() if market else None
        keys = (c for c in self._rules if m is None or c.market == m)
        return sorted(keys, key=lambda c: (c.market, c.root))

    def __contains__(self, contract: object) -> bool:
        return contract in self._rules

    def __iter__(self) -> Iterator[ContractIdentifier]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


class RegistryBuilder:
    """One-shot accumulator; registering an identifier twice is a configuration error."""

    def __init__(self) -> None:
        self._rules: dict[ContractIdentifier, Rule] = {}

    def register(self, contract: ContractIdentifier, rule: Rule) -> RegistryBuilder:
        if contract in self._rules:
            raise DuplicateRegistration(contract)
        self._rules[contract] = rule
        return self

    def register_all(self, entries: Iterable[tuple[ContractIdentifier, Rule]]) -> RegistryBuilder:
        for contract, rule in entries:
            self.register(contract, rule)
        return self

    def build(self) -> ExpiryRegistry:
        registry = ExpiryRegistry(self._rules)
        logger.info("registry_built", extra={"contracts": len(registry)})
        return registry

