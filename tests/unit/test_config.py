import logging
import textwrap
from pathlib import Path

import pytest

from futures_expiry.config.loader import DEFAULTS, load_config


def test_defaults_load(monkeypatch):
    for k in ("LOGS_ROOT", "HOLIDAYS_FILE", "PUBLICATIONS_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(f"FUTURES_EXPIRY_{k}", raising=False)
    cfg = load_config()
    assert cfg.logs_root == Path(DEFAULTS.logs_root)
    assert cfg.holidays_file is None
    assert cfg.publications_file is None
    assert cfg.log_level == "INFO"
    assert cfg.console_level == logging.INFO


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("FUTURES_EXPIRY_LOGS_ROOT", str(tmp_path / "env-logs"))
    monkeypatch.setenv("FUTURES_EXPIRY_HOLIDAYS_FILE", str(tmp_path / "holidays.yaml"))
    monkeypatch.setenv("FUTURES_EXPIRY_LOG_LEVEL", "debug")
    cfg = load_config()
    assert cfg.logs_root == tmp_path / "env-logs"
    assert cfg.holidays_file == tmp_path / "holidays.yaml"
    assert cfg.log_level == "DEBUG"
    assert cfg.console_level == logging.DEBUG


def test_yaml_overrides(tmp_path, monkeypatch):
    # set env to something, then ensure YAML beats it
    monkeypatch.setenv("FUTURES_EXPIRY_LOG_LEVEL", "ERROR")
    yml = tmp_path / "settings.yaml"
    yml.write_text(
        textwrap.dedent(
            """
        logs_root: yaml-logs
        publications_file: extra-publications.yaml
        log_level: warning
    """
        ).strip(),
        encoding="utf-8",
    )
    cfg = load_config(yml)
    assert cfg.logs_root == Path("yaml-logs")
    assert cfg.publications_file == Path("extra-publications.yaml")
    assert cfg.log_level == "WARNING"


def test_yaml_must_be_a_mapping(tmp_path):
    yml = tmp_path / "settings.yaml"
    yml.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(yml)


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("FUTURES_EXPIRY_LOG_LEVEL", "chatty")
    assert load_config().console_level == logging.INFO
