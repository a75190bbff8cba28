"""Tests for structured logging — JSON shape and extra-field surfacing."""

import json
import logging

from invoice_dashboard.infrastructure.observability import JSONFormatter, setup_logging


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "invoice_dashboard.services.data", logging.ERROR, __file__, 1, msg, None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_core_fields():
    out = json.loads(JSONFormatter().format(_record("Database Error: boom")))

    assert out["level"] == "ERROR"
    assert out["logger"] == "invoice_dashboard.services.data"
    assert out["message"] == "Database Error: boom"
    assert "timestamp" in out


def test_json_formatter_surfaces_known_extras_only():
    out = json.loads(JSONFormatter().format(
        _record("Cache hit", cache_key='[["invoice-pages"]]', tag="i-p", unrelated="x"),
    ))

    assert out["cache_key"] == '[["invoice-pages"]]'
    assert out["tag"] == "i-p"
    assert "unrelated" not in out
    assert "fetcher" not in out


def test_setup_logging_does_not_stack_handlers():
    before = len(logging.root.handlers)
    setup_logging("DEBUG", "text")
    setup_logging("INFO", "json")
    try:
        assert len(logging.root.handlers) == before + 1
        assert logging.root.level == logging.INFO
    finally:
        from invoice_dashboard.infrastructure import observability
        logging.root.removeHandler(observability._handler)
        observability._handler = None
        logging.root.setLevel(logging.WARNING)
