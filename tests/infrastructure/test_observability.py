"""Structured Logging — JSON formatter surfaces known extra fields."""

import json
import logging

from health_monitor.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "health_monitor.test", logging.ERROR, __file__, 1,
        "Failed to %s", ("fetch patients",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "ERROR"
    assert log["logger"] == "health_monitor.test"
    assert log["message"] == "Failed to fetch patients"
    assert "timestamp" in log


def test_json_formatter_includes_known_extras_only():
    log = json.loads(JSONFormatter().format(_record(
        patient_id="p1", operation="fetch patients", unrelated="x",
    )))
    assert log["patient_id"] == "p1"
    assert log["operation"] == "fetch patients"
    assert "unrelated" not in log
    assert "prescription_id" not in log


def test_setup_logging_installs_handler():
    handler = setup_logging("debug", "text")
    try:
        assert handler in logging.root.handlers
        assert logging.root.level == logging.DEBUG
        assert not isinstance(handler.formatter, JSONFormatter)
    finally:
        logging.root.removeHandler(handler)


def test_setup_logging_is_idempotent():
    first = setup_logging("info", "json")
    second = setup_logging("warning", "json")
    try:
        assert first not in logging.root.handlers
        assert logging.root.handlers.count(second) == 1
        installed = [
            h for h in logging.root.handlers
            if isinstance(h.formatter, JSONFormatter)
        ]
        assert installed == [second]
        assert logging.root.level == logging.WARNING
    finally:
        logging.root.removeHandler(second)


def test_json_formatter_uses_record_time():
    record = _record()
    record.created = 0.0
    log = json.loads(JSONFormatter().format(record))
    assert log["timestamp"].startswith("1970-01-01T00:00:00")
