import json
import logging
from datetime import datetime

from futures_expiry.utils.logging import JsonFormatter, get_logger, log_file_path, record_extras


def test_log_file_path(tmp_path):
    now = datetime(2024, 3, 15, 9, 30, 5)
    assert log_file_path(tmp_path, "run-1", now) == tmp_path / "20240315" / "run-1.log"
    assert log_file_path(tmp_path, None, now) == tmp_path / "20240315" / "093005.log"


def test_json_formatter_keeps_extras():
    record = logging.LogRecord("futures_expiry.engine", logging.INFO, __file__, 1, "expiry_resolved", None, None)
    record.contract = "ES.cme"
    assert record_extras(record) == {"contract": "ES.cme"}

    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "expiry_resolved"
    assert payload["level"] == "INFO"
    assert payload["contract"] == "ES.cme"
    assert "lineno" not in payload


def test_get_logger_writes_json_lines(tmp_path):
    log = get_logger("futures_expiry.tests.jsonl", logs_root=tmp_path, run_id="unit")
    assert get_logger("futures_expiry.tests.jsonl", logs_root=tmp_path / "other") is log

    log.info("registry_built", extra={"contracts": 3})
    for h in log.handlers:
        h.flush()

    files = list(tmp_path.glob("*/unit.log"))
    assert len(files) == 1
    events = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert [e["event"] for e in events] == ["logger_initialized", "registry_built"]
    assert events[-1]["contracts"] == 3
