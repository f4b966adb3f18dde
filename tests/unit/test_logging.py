"""Unit tests for the correlation id carried on log records."""

import json
import logging

from app.config import settings
from app.core.logging import BillingJsonFormatter, CorrelationIdFilter, correlation_id


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("app.services.payment_service", logging.INFO, __file__, 1, "Payment added", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_filter_copies_context_id():
    token = correlation_id.set("req-42")
    try:
        record = _record()
        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-42"
    finally:
        correlation_id.reset(token)


def test_filter_keeps_explicit_id():
    token = correlation_id.set("req-42")
    try:
        record = _record(correlation_id="from-extra")
        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "from-extra"
    finally:
        correlation_id.reset(token)


def test_filter_outside_request():
    record = _record()
    CorrelationIdFilter().filter(record)
    assert record.correlation_id is None


def test_json_formatter_fields():
    formatter = BillingJsonFormatter(fmt="%(asctime)s %(level)s %(name)s %(message)s")
    line = json.loads(formatter.format(_record(correlation_id="req-7")))
    assert line["message"] == "Payment added"
    assert line["level"] == "INFO"
    assert line["logger"] == "app.services.payment_service"
    assert line["environment"] == settings.ENVIRONMENT
    assert line["correlation_id"] == "req-7"
