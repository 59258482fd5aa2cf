from __future__ import annotations


class ExpiryError(Exception):
    """Base class for every error raised by the expiry engine."""


class UnsupportedContract(ExpiryError, LookupError):
    """No expiry rule was registered for the requested contract."""

    def __init__(self, contract: object) -> None:
        super().__init__(f"No expiry rule registered for {contract}")
        self.contract = contract


class CalendarUnavailable(ExpiryError, LookupError):
    """A holiday calendar or publication table required by a rule is missing."""


class InvalidDeliveryMonth(ExpiryError, ValueError):
    """The delivery month input is malformed or out of range."""


class DuplicateRegistration(ExpiryError, ValueError):
    """The same contract was registered twice while building a registry."""

    def __init__(self, contract: object) -> None:
        super().__init__(f"Expiry rule already registered for {contract}")
        self.contract = contract
