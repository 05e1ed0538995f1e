"""Tests for the structured logging system (fiscal_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from fiscal_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "fiscal_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("tax_calculated", extra={"line_count": 3, "country": "FR"})

        record = _parse_log(stream)
        assert record["line_count"] == 3
        assert record["country"] == "FR"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", reservation_id="R-1")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["reservation_id"] == "R-1"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_fiscal_exception_code_extracted(self):
        """Fiscal kernel exceptions carry .code and their context attributes."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        from fiscal_kernel.exceptions import NoApplicableRuleError

        try:
            raise NoApplicableRuleError("FR", "SPA", date(2025, 6, 15))
        except NoApplicableRuleError:
            logger.error("tax_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "NO_APPLICABLE_TAX_RULE"
        assert record["exc_type"] == "NoApplicableRuleError"
        assert record["exc_country_code"] == "FR"
        assert record["exc_tax_category"] == "SPA"
        assert record["exc_as_of_date"] == "2025-06-15"

    def test_extra_overrides_context_field(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        with LogContext.bind(country_code="fr", reservation_id="R-7"):
            get_logger("test").info("tax_calculated", extra={"country_code": "FR"})

        record = _parse_log(stream)
        assert record["country_code"] == "FR"
        assert record["reservation_id"] == "R-7"

    def test_extra_cannot_replace_envelope(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("real", extra={"level": "FAKE"})

        assert _parse_log(stream)["level"] == "INFO"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "reservation_id" not in record

    def test_uuid_and_decimal_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info("with_values", extra={"rule_id": uid, "amount": Decimal("9.00")})

        record = _parse_log(stream)
        assert record["rule_id"] == str(uid)
        assert record["amount"] == "9.00"

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= record.keys()


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", country_code="FR")
        assert LogContext.get_all() == {"correlation_id": "x", "country_code": "FR"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner"):
            assert LogContext.get_all()["correlation_id"] == "inner"
        assert LogContext.get_all()["correlation_id"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        with LogContext.bind(reservation_id="temp"):
            assert LogContext.get_all()["reservation_id"] == "temp"
        assert "reservation_id" not in LogContext.get_all()

    def test_bind_skips_none(self):
        LogContext.set(country_code="MA")
        with LogContext.bind(country_code=None, reservation_id="R-9"):
            assert LogContext.get_all()["country_code"] == "MA"
        assert LogContext.get_all() == {"country_code": "MA"}

    def test_additive_set(self):
        LogContext.set(correlation_id="a")
        LogContext.set(trace_id="b")
        ctx = LogContext.get_all()
        assert ctx["correlation_id"] == "a"
        assert ctx["trace_id"] == "b"

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            actor_id="a",
            reservation_id="r",
            country_code="SA",
            trace_id="t",
        )
        assert LogContext.get_all() == {
            "correlation_id": "c",
            "actor_id": "a",
            "reservation_id": "r",
            "country_code": "SA",
            "trace_id": "t",
        }


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_idempotent(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        configure_logging(handler=handler)
        assert len(logging.getLogger("fiscal_kernel").handlers) == 1

    def test_does_not_propagate(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        assert logging.getLogger("fiscal_kernel").propagate is False

    def test_level_applied(self):
        handler, stream = _make_handler()
        configure_logging(level="WARNING", handler=handler)
        logger = get_logger("test")
        logger.info("dropped")
        logger.warning("kept")
        assert [r["message"] for r in _parse_all_logs(stream)] == ["kept"]

    def test_reset_clears_handlers(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        reset_logging()
        assert logging.getLogger("fiscal_kernel").handlers == []
