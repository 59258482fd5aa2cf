"""
Product table: every supported contract and its expiry rule.

Holiday sources are chosen per product and deliberately not unified: some
products count business days against the US calendar, some against their own
exchange calendar, and a few only against Good Friday.
"""

from __future__ import annotations

import threading
from datetime import timedelta

from ..model.contracts import ContractIdentifier
from ..model.publications import ENBRIDGE_NOS, USDA_DAIRY
from ..utils.business_days import FRIDAY, THURSDAY, WEDNESDAY
from ..utils.market import (
    FHJKQUVX,
    FHKNQUVZ,
    FHKNQUX,
    FHKNUX,
    GJKMNQVZ,
    GJMQVZ,
    HKNUZ,
    HKNV,
    HKNVZ,
    HMUZ,
)
from .anchors import (
    FixedDay,
    LastWeekday,
    NthBusinessDay,
    NthLastBusinessDay,
    NthWeekday,
    PublicationDate,
    PublicationFallback,
)
from .context import EXCHANGE, GOOD_FRIDAY, US
from .irregular import (
    feeder_cattle_last_trade,
    three_business_days_before_prior_25th,
    vix_final_settlement,
    wednesday_nearest_fifteenth,
)
from .registry import ExpiryRegistry, RegistryBuilder
from .rules import FunctionRule, Rule, rule


def _c(root: str, market: str) -> ContractIdentifier:
    return ContractIdentifier(root, market)


def _hm(hours: int, minutes: int = 0) -> timedelta:
    return timedelta(hours=hours, minutes=minutes)


# ---------------------- shared rule shapes ----------------------

_THIRD_LAST_BD_US = rule().on(NthLastBusinessDay(3)).using(US).build()

_LAST_BD_US_EXCHANGE_ADJUSTED = rule().on(NthLastBusinessDay(1)).using(US).adjust_backward(EXCHANGE).build()

_EQUITY_INDEX_QUARTERLY = (
    rule().in_cycle(HMUZ).on(NthWeekday(FRIDAY, 3)).at(13, 30).described("3rd Friday, 9:30 ET").build()
)

_BD_BEFORE_15TH = rule().on(FixedDay(15)).shift(-1).using(US).described("business day prior to the 15th")

_IMM_FX = rule().on(NthWeekday(WEDNESDAY, 3)).shift(-2).using(US).at(14, 16)

_LAST_THURSDAY_INDIA = (
    rule().on(LastWeekday(THURSDAY)).adjust_backward(EXCHANGE).at(15, 30).described("last Thursday, 15:30").build()
)

_MSCI_ICE = rule().on(NthWeekday(FRIDAY, 3)).adjust_backward(GOOD_FRIDAY).at(16, 15).build()

_CRYPTO = rule().on(LastWeekday(FRIDAY)).adjust_backward(EXCHANGE).at(15, 0).described("last Friday").build()

_DAIRY = (
    rule()
    .on(PublicationDate(USDA_DAIRY, PublicationFallback(month_offset=1, day=5)))
    .shift(-1)
    .using(US)
    .at(17, 10)
    .described("business day before the USDA price announcement")
    .build()
)


PRODUCTS: tuple[tuple[ContractIdentifier, Rule], ...] = (
    # ---- Metals
    # Trading terminates on the third last business day of the delivery month.
    (_c("GC", "comex"), _THIRD_LAST_BD_US),
    (_c("SI", "comex"), _THIRD_LAST_BD_US),
    (_c("PL", "nymex"), _THIRD_LAST_BD_US),
    (_c("PA", "nymex"), _THIRD_LAST_BD_US),
    # Last business day of the contract month.
    (_c("AUP", "comex"), _LAST_BD_US_EXCHANGE_ADJUSTED),
    # 12:00 CT on the third last business day of the contract month.
    (_c("HG", "comex"), rule().on(NthLastBusinessDay(3)).using(EXCHANGE).at(17, 0).build()),
    # Business day prior to the last Wednesday of the contract month.
    (_c("HRC", "nymex"), rule().on(LastWeekday(WEDNESDAY)).shift(-1).using(US).build()),
    # ICE mini metals only observe Good Friday.
    (_c("YG", "nyseliffe"), rule().on(NthLastBusinessDay(3)).using(GOOD_FRIDAY).at(13, 30).build()),
    (_c("YI", "nyseliffe"), rule().on(NthLastBusinessDay(3)).using(GOOD_FRIDAY).at(13, 25).build()),
    # ---- Indices
    (_c("ES", "cme"), _EQUITY_INDEX_QUARTERLY),
    (_c("NQ", "cme"), _EQUITY_INDEX_QUARTERLY),
    (_c("RTY", "cme"), _EQUITY_INDEX_QUARTERLY),
    (_c("EMD", "cme"), _EQUITY_INDEX_QUARTERLY),
    (_c("YM", "cbot"), _EQUITY_INDEX_QUARTERLY),
    # 4:00 p.m. ET on the 3rd Friday of the contract month.
    (_c("EI", "cme"), rule().in_cycle(HMUZ).on(NthWeekday(FRIDAY, 3)).at(20, 0).build()),
    (
        _c("BIO", "cme"),
        rule().in_cycle(HMUZ).on(NthWeekday(FRIDAY, 3)).adjust_backward(EXCHANGE).at(13, 30).build(),
    ),
    # 5:00 p.m. ET on the business day prior to the 2nd Friday of the contract month.
    (_c("NKD", "cme"), rule().in_cycle(HMUZ).on(NthWeekday(FRIDAY, 2)).shift(-1).using(US).at(21, 0).build()),
    (
        _c("VX", "cfe"),
        FunctionRule(vix_final_settlement, time_of_day=_hm(13, 0), description="VIX settlement Wednesday"),
    ),
    # 3rd Wednesday of the contract month, 1:30 p.m.
    (
        _c("AW", "cbot"),
        rule().in_cycle(HMUZ).on(NthWeekday(WEDNESDAY, 3)).adjust_backward(EXCHANGE).at(18, 30).build(),
    ),
    # 11th business day of the contract month, 1:40 p.m.
    (_c("GD", "cme"), rule().on(NthBusinessDay(11)).using(EXCHANGE).at(18, 40).build()),
    (
        _c("IBV", "cme"),
        FunctionRule(
            wednesday_nearest_fifteenth,
            cycle=GJMQVZ,
            time_of_day=_hm(20, 0),
            description="Wednesday closest to the 15th",
        ),
    ),
    # Day before the second Friday; second last business day.
    (_c("NK", "sgx"), rule().on(NthWeekday(FRIDAY, 2)).shift(-1).using(EXCHANGE).at(14, 30).build()),
    # Business day before the last calendar day of the month.
    (
        _c("TW", "sgx"),
        rule().on(FixedDay(31)).shift(-1).using(EXCHANGE).at(13, 45).described("day before month end").build(),
    ),
    (_c("NIFTY", "india"), _LAST_THURSDAY_INDIA),
    (_c("BANKNIFTY", "india"), _LAST_THURSDAY_INDIA),
    (_c("SENSEX", "india"), _LAST_THURSDAY_INDIA),
    (_c("MFS", "nyseliffe"), _MSCI_ICE),
    (_c("MME", "nyseliffe"), _MSCI_ICE),
    # ---- Forestry
    # Business day prior to the 16th calendar day of the contract month at 12:05 CT.
    (_c("LBS", "cme"), rule().in_cycle(FHKNUX).on(FixedDay(16)).shift(-1).using(US).at(17, 5).build()),
    # ---- Grains
    (_c("ZW", "cbot"), _BD_BEFORE_15TH.in_cycle(HKNUZ).build()),
    (_c("KE", "cbot"), _BD_BEFORE_15TH.in_cycle(HKNUZ).build()),
    (_c("ZC", "cbot"), _BD_BEFORE_15TH.in_cycle(HKNUZ).build()),
    (_c("ZO", "cbot"), _BD_BEFORE_15TH.in_cycle(HKNUZ).build()),
    (_c("ZS", "cbot"), _BD_BEFORE_15TH.in_cycle(FHKNQUX).build()),
    (_c("ZM", "cbot"), _BD_BEFORE_15TH.in_cycle(FHKNQUVZ).build()),
    (_c("ZL", "cbot"), _BD_BEFORE_15TH.in_cycle(FHKNQUVZ).build()),
    (_c("BWF", "cbot"), _LAST_BD_US_EXCHANGE_ADJUSTED),
    # ---- Currencies
    # 10:16 ET two days prior to the third Wednesday settlement.
    (_c("DX", "ice"), rule().in_cycle(HMUZ).on(NthWeekday(WEDNESDAY, 3)).shift(-2).at(10, 16).build()),
    # 9:16 CT on the second business day before the third Wednesday.
    (_c("6B", "cme"), _IMM_FX.build()),
    (_c("6J", "cme"), _IMM_FX.build()),
    (_c("6E", "cme"), _IMM_FX.build()),
    (_c("6A", "cme"), _IMM_FX.build()),
    (_c("6S", "cme"), _IMM_FX.in_cycle(HMUZ).build()),
    (_c("6N", "cme"), _IMM_FX.in_cycle(HMUZ).build()),
    (_c("6C", "cme"), rule().on(NthWeekday(WEDNESDAY, 3)).shift(-1).using(US).at(14, 16).build()),
    (_c("6M", "cme"), _IMM_FX.adjust_backward(EXCHANGE).build()),
    (_c("6Z", "cme"), _IMM_FX.adjust_backward(EXCHANGE).build()),
    # 15th of the month, or the next Moscow business day.
    (_c("6R", "cme"), rule().on(FixedDay(15)).using(US).adjust_forward().at(8, 0).build()),
    # Last business day of the month preceding the contract month.
    (
        _c("6L", "cme"),
        rule().months_before(1).on(NthLastBusinessDay(1)).using(US).adjust_backward(EXCHANGE).at(14, 15).build(),
    ),
    (_c("BTC", "cme"), _CRYPTO),
    (_c("ETH", "cme"), _CRYPTO),
    # ---- Financials
    # Seventh business day preceding the last business day of the delivery month, 12:01.
    (_c("ZB", "cbot"), rule().in_cycle(HMUZ).on(NthLastBusinessDay(1)).shift(-7).using(US).at(12, 1).build()),
    (_c("ZN", "cbot"), rule().in_cycle(HMUZ).on(NthLastBusinessDay(1)).shift(-7).using(US).at(12, 1).build()),
    (_c("ZF", "cbot"), rule().in_cycle(HMUZ).on(NthLastBusinessDay(1)).using(US).at(12, 1).build()),
    (_c("ZT", "cbot"), rule().in_cycle(HMUZ).on(NthLastBusinessDay(1)).using(US).at(12, 1).build()),
    # Second London bank business day before the 3rd Wednesday, 11:00.
    (_c("GE", "cme"), rule().on(NthWeekday(WEDNESDAY, 3)).shift(-2).using(EXCHANGE).at(11, 0).build()),
    # ---- Energies
    # Third business day prior to the 25th of the preceding month (or prior to the
    # business day before the 25th when the 25th is not a business day).
    (_c("CL", "nymex"), rule().months_before(1).on(FixedDay(25)).shift(-3, roll_first=True).using(US).build()),
    (_c("HO", "nymex"), rule().months_before(1).on(NthLastBusinessDay(1)).using(US).build()),
    (_c("RB", "nymex"), rule().months_before(1).on(NthLastBusinessDay(1)).using(US).build()),
    (_c("HH", "nymex"), rule().months_before(1).on(NthLastBusinessDay(3)).using(EXCHANGE).build()),
    (_c("HP", "nymex"), rule().months_before(1).on(NthLastBusinessDay(4)).using(EXCHANGE).build()),
    # Last London business day two months prior to the contract month.
    (
        _c("BZ", "nymex"),
        rule().months_before(2).on(NthLastBusinessDay(1)).using(US).adjust_backward(EXCHANGE).build(),
    ),
    # One weekday before the Enbridge Notice of Shipments date; holidays are not counted.
    (
        _c("CSW", "nymex"),
        rule()
        .on(PublicationDate(ENBRIDGE_NOS, PublicationFallback(month_offset=-1, day=21)))
        .shift(-1)
        .described("weekday before the Enbridge NOS date")
        .build(),
    ),
    (_c("CSX", "nymex"), _LAST_BD_US_EXCHANGE_ADJUSTED),
    (
        _c("HCL", "nymex"),
        FunctionRule(three_business_days_before_prior_25th, description="3 business days before the prior 25th"),
    ),
    (_c("B0", "nymex"), rule().on(NthLastBusinessDay(1)).using(US).build()),
    # 12:00 London, 2 business days prior to the 14th calendar day of the delivery month.
    (_c("G", "ice"), rule().on(FixedDay(14)).shift(-2).using(US).at(12, 0).build()),
    # ---- Meats
    (_c("LE", "cme"), rule().in_cycle(GJMQVZ).on(NthLastBusinessDay(1)).using(US).at(12, 0).build()),
    (_c("HE", "cme"), rule().in_cycle(GJKMNQVZ).on(NthBusinessDay(10)).using(US).at(12, 0).build()),
    (_c("GF", "cme"), FunctionRule(feeder_cattle_last_trade, cycle=FHJKQUVX, description="last clean Thursday")),
    # ---- Softs
    (_c("CT", "ice"), rule().in_cycle(HKNVZ).on(NthLastBusinessDay(17)).using(EXCHANGE).build()),
    (_c("OJ", "ice"), rule().in_cycle(FHKNUX).on(NthLastBusinessDay(15)).using(EXCHANGE).build()),
    (_c("KC", "ice"), rule().in_cycle(HKNUZ).on(NthLastBusinessDay(9)).using(EXCHANGE).build()),
    (_c("CC", "ice"), rule().in_cycle(HKNUZ).on(NthLastBusinessDay(12)).using(EXCHANGE).build()),
    (_c("SB", "ice"), rule().in_cycle(HKNV).months_before(1).on(NthLastBusinessDay(1)).using(EXCHANGE).build()),
    (_c("YO", "nymex"), rule().in_cycle(HKNV).months_before(1).on(NthLastBusinessDay(1)).using(US).build()),
    # ---- Dairy
    (_c("CB", "cme"), _DAIRY),
    (_c("CSC", "cme"), _DAIRY),
    (_c("DC", "cme"), _DAIRY),
    (_c("DY", "cme"), _DAIRY),
)


def build_default_registry() -> ExpiryRegistry:
    return RegistryBuilder().register_all(PRODUCTS).build()


_default: ExpiryRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> ExpiryRegistry:
    """Registry of every product above, built once on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = build_default_registry()
    return _default
