from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from . import __version__
from .config.loader import Config, load_config
from .engine.products import default_registry
from .engine.service import ExpiryEngine
from .errors import CalendarUnavailable, UnsupportedContract
from .io_adapters.holiday_loader import load_holiday_calendar
from .io_adapters.publication_loader import load_builtin_publication_tables, load_publication_tables
from .model.calendars import StaticHolidayCalendar
from .model.contracts import ContractIdentifier, DeliveryMonth
from .model.publications import PublicationTables
from .utils.logging import get_logger

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CALENDAR = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="futures-expiry", description="Futures contract expiry calculator")
    sub = p.add_subparsers(dest="cmd", required=False)

    # version
    sub.add_parser("version", help="print version")

    # doctor
    doctor = sub.add_parser("doctor", help="show config and the data the engine would load")
    doctor.add_argument("--config", type=Path, default=None, help="Optional YAML settings file")

    # contracts
    contracts = sub.add_parser("contracts", help="list supported contracts")
    contracts.add_argument("--market", type=str, default=None, help="Only this market, e.g. cme, nymex")
    contracts.add_argument("--config", type=Path, default=None, help="Optional YAML settings file")

    # resolve
    resolve = sub.add_parser("resolve", help="final trading timestamp for one contract month")
    resolve.add_argument("root", help="Root symbol, e.g. ES, CL, GC")
    resolve.add_argument("market", help="Market, e.g. cme, nymex, comex")
    resolve.add_argument("month", help="Delivery month, YYYY-MM")
    resolve.add_argument("--config", type=Path, default=None, help="Optional YAML settings file")
    resolve.add_argument("--json", dest="as_json", action="store_true", help="Output JSON")

    return p


def _run_logger(cfg: Config) -> tuple[logging.Logger, str]:
    run_id = datetime.now().strftime("%Y%m%d-%H%M%S")
    log = get_logger("futures_expiry", logs_root=cfg.logs_root, run_id=run_id, console_level=cfg.console_level)
    return log, run_id


def _load_calendar(cfg: Config) -> StaticHolidayCalendar:
    # No snapshot configured: every calendar lookup raises CalendarUnavailable
    if cfg.holidays_file is None:
        return StaticHolidayCalendar()
    return load_holiday_calendar(cfg.holidays_file)


def _load_publications(cfg: Config) -> PublicationTables:
    tables = load_builtin_publication_tables()
    if cfg.publications_file is not None:
        tables = tables.merged(load_publication_tables(cfg.publications_file))
    return tables


def _cmd_doctor(cfg: Config) -> int:
    log, run_id = _run_logger(cfg)

    print("env ok")
    print(f"config.logs_root         = {cfg.logs_root}")
    print(f"config.log_level         = {cfg.log_level}")
    print(f"config.holidays_file     = {cfg.holidays_file or '(not set)'}")
    print(f"config.publications_file = {cfg.publications_file or '(not set)'}")

    try:
        calendar = _load_calendar(cfg)
        publications = _load_publications(cfg)
    except OSError as e:
        log.error("doctor_failed", extra={"error": str(e), "run_id": run_id})
        print(f"calendar data unavailable: {e}", file=sys.stderr)
        return EXIT_CALENDAR
    registry = default_registry()

    print(f"holiday calendars        = {len(calendar)}")
    for exchange, product in calendar.keys():
        print(f"  - {exchange}/{product}: {len(calendar.get_holidays(exchange, product))} days")
    print(f"publication tables       = {len(publications)}")
    for name, table in sorted(publications.items()):
        months = table.months()
        span = f"{months[0]}..{months[-1]}" if months else "empty"
        print(f"  - {name}: {len(table)} months ({span})")
    print(f"registered contracts     = {len(registry)}")

    log.info(
        "doctor_config",
        extra={
            "logs_root": str(cfg.logs_root),
            "holidays_file": str(cfg.holidays_file) if cfg.holidays_file else None,
            "publications_file": str(cfg.publications_file) if cfg.publications_file else None,
            "calendars": len(calendar),
            "publication_tables": len(publications),
            "contracts": len(registry),
            "run_id": run_id,
        },
    )
    return EXIT_OK


def _cmd_contracts(cfg: Config, market: str | None) -> int:
    log, run_id = _run_logger(cfg)
    registry = default_registry()
    found = registry.contracts(market)
    log.debug("contracts_listed", extra={"market": market, "count": len(found), "run_id": run_id})
    if not found:
        print("No contracts.")
        return EXIT_OK
    for c in found:
        print(f"{c.root:<10} {c.market:<10} {registry.resolve(c).description or ''}".rstrip())
    return EXIT_OK


def _cmd_resolve(cfg: Config, args: argparse.Namespace) -> int:
    log, run_id = _run_logger(cfg)
    try:
        contract = ContractIdentifier(args.root, args.market)
        month = DeliveryMonth.of(args.month)
        registry = default_registry()
        engine = ExpiryEngine(registry, _load_calendar(cfg), _load_publications(cfg))
        ts = engine.resolve_expiry(contract, month)
    except (CalendarUnavailable, OSError) as e:
        log.error("resolve_failed", extra={"error": str(e), "run_id": run_id})
        print(f"calendar data unavailable: {e}", file=sys.stderr)
        return EXIT_CALENDAR
    except (UnsupportedContract, ValueError) as e:
        log.error("resolve_failed", extra={"error": str(e), "run_id": run_id})
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    if args.as_json:
        rule = registry.resolve(contract)
        listed = rule.delivery_month(month)
        payload = {
            "contract": str(contract),
            "month": str(listed),
            "ticker": listed.ticker(contract.root),
            "description": rule.description,
            "date": ts.date.isoformat(),
            "time": (ts.to_datetime().strftime("%H:%M") if ts.time_of_day is not None else None),
            "timestamp": ts.to_datetime().isoformat(),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(ts)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        print(__version__)
        return EXIT_OK

    if args.cmd == "doctor":
        return _cmd_doctor(load_config(args.config))

    if args.cmd == "contracts":
        return _cmd_contracts(load_config(args.config), args.market)

    if args.cmd == "resolve":
        return _cmd_resolve(load_config(args.config), args)

    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
