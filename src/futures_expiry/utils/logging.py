"""
Run logging for the CLI: brief records on the console, full JSON lines on disk.

Library modules only call ``logging.getLogger(__name__)`` and attach their
context through ``extra=``; handlers are wired once per process by
:func:`get_logger`.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

_CONFIGURED = "_futures_expiry_configured"
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Attribute names every LogRecord carries; anything else came in through `extra=`
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """Event name plus its `extra=` context, one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def log_file_path(logs_root: Path, run_id: str | None = None, now: datetime | None = None) -> Path:
    """logs_root/YYYYMMDD/<run_id>.log; the run id defaults to HHMMSS."""
    now = now or datetime.now()
    return Path(logs_root) / now.strftime("%Y%m%d") / f"{run_id or now.strftime('%H%M%S')}.log"


def get_logger(
    name: str, logs_root: Path, run_id: str | None = None, console_level: int = logging.INFO
) -> logging.Logger:
    """
    Logger for one CLI run. The first call for `name` attaches the handlers;
    later calls return it unchanged.
    """
    logger = logging.getLogger(name)
    if getattr(logger, _CONFIGURED, False):
        return logger
    logger.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    path = log_file_path(logs_root, run_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    jsonl = logging.FileHandler(path, encoding="utf-8")
    jsonl.setLevel(logging.DEBUG)
    jsonl.setFormatter(JsonFormatter())

    for handler in (console, jsonl):
        logger.addHandler(handler)
    setattr(logger, _CONFIGURED, True)
    logger.debug("logger_initialized", extra={"log_file": str(path)})
    return logger
