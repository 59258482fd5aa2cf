from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Defaults:
    logs_root: str
    holidays_file: str | None
    publications_file: str | None
    log_level: str


DEFAULTS = Defaults(
    logs_root="logs",
    holidays_file=None,  # Optional YAML holiday snapshot (see io_adapters/holiday_loader.py)
    publications_file=None,  # Optional YAML overlaid on the packaged publication tables
    log_level="INFO",
)
