from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .defaults import DEFAULTS

_KEYS = ("logs_root", "holidays_file", "publications_file", "log_level")
_ENV_PREFIX = "FUTURES_EXPIRY_"


@dataclass(frozen=True)
class Config:
    logs_root: Path
    holidays_file: Path | None
    publications_file: Path | None
    log_level: str

    @property
    def console_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def _req_path(base: dict[str, Any], key: str, default: str) -> Path:
    """Return a required Path, falling back to default if missing/empty."""
    val = base.get(key) or default
    return Path(val)


def _opt_path(base: dict[str, Any], key: str) -> Path | None:
    """Return an optional Path, or None if missing/empty."""
    val = base.get(key)
    return Path(val) if val else None


def _apply_yaml_overrides(base: dict[str, Any], yml: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k in _KEYS:
        if k in yml:
            out[k] = yml[k]
    return out


def _apply_env_overrides(base: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k in _KEYS:
        if v := os.getenv(_ENV_PREFIX + k.upper()):
            out[k] = v
    return out


def load_config(yaml_path: Path | None = None) -> Config:
    # start from defaults as a dict
    base = {
        "logs_root": DEFAULTS.logs_root,
        "holidays_file": DEFAULTS.holidays_file,
        "publications_file": DEFAULTS.publications_file,
        "log_level": DEFAULTS.log_level,
    }

    # ENV overrides (middle precedence)
    base = _apply_env_overrides(base)

    # YAML overrides (highest precedence)
    if yaml_path:
        data = yaml.safe_load(Path(yaml_path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Config YAML must be a mapping at the top level.")
        base = _apply_yaml_overrides(base, data)

    return Config(
        logs_root=_req_path(base, "logs_root", DEFAULTS.logs_root),
        holidays_file=_opt_path(base, "holidays_file"),
        publications_file=_opt_path(base, "publications_file"),
        log_level=str(base.get("log_level") or DEFAULTS.log_level).upper(),
    )
