"""Tests for the structured logging system (vending_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool
from vending_kernel.logging_config import (
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
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "vending_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("coin_inserted", extra={"coin_cents": 25, "coin": "QUARTER"})

        record = _parse_log(stream)
        assert record["coin_cents"] == 25
        assert record["coin"] == "QUARTER"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        LogContext.set(machine_id="m-1", label="A1")
        logger.info("test_msg")

        record = _parse_log(stream)
        assert record["machine_id"] == "m-1"
        assert record["label"] == "A1"

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

    def test_kernel_exception_code_extracted(self):
        """Vending kernel exceptions carry .code attribute."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        from vending_kernel.exceptions import DuplicateLabelError

        try:
            raise DuplicateLabelError("A1", 2)
        except DuplicateLabelError:
            logger.critical("machine_corrupt", exc_info=True)

        record = _parse_log(stream)
        assert record["level"] == "CRITICAL"
        assert record["exc_code"] == "DUPLICATE_LABEL"
        assert record["exc_type"] == "DuplicateLabelError"
        assert record["exc_label"] == "A1"
        assert record["exc_match_count"] == 2

    def test_insufficient_funds_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        from vending_kernel.exceptions import InsufficientFundsError

        try:
            raise InsufficientFundsError("A2", 150, 125)
        except InsufficientFundsError:
            logger.info("short", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INSUFFICIENT_FUNDS"
        assert record["exc_required_cents"] == 25

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "machine_id" not in record

    def test_uuid_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        uid = uuid4()
        logger.info("with_uuid", extra={"session_id": uid})

        record = _parse_log(stream)
        assert record["session_id"] == str(uid)

    def test_decimal_and_enum_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("values", extra={"price": Decimal("0.75"), "coin": Coin.DIME})

        record = _parse_log(stream)
        assert record["price"] == "0.75"
        assert record["coin"] == "DIME"

    def test_unknown_objects_fall_back_to_str(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("values", extra={"pool": CoinPool.empty(), "coins": [Coin.NICKLE]})

        record = _parse_log(stream)
        assert record["pool"] == str(CoinPool.empty())
        assert record["coins"] == ["NICKLE"]

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
            assert "ts" in record
            assert "level" in record
            assert "logger" in record
            assert "message" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", machine_id="y")
        ctx = LogContext.get_all()
        assert ctx == {"correlation_id": "x", "machine_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(command="outer")
        with LogContext.bind(command="inner"):
            assert LogContext.get_all()["command"] == "inner"
        assert LogContext.get_all()["command"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        assert "label" not in LogContext.get_all()
        with LogContext.bind(label="B1"):
            assert LogContext.get_all()["label"] == "B1"
        assert "label" not in LogContext.get_all()

    def test_bind_ignores_none_values(self):
        LogContext.set(label="A1")
        with LogContext.bind(label=None, command="refund"):
            assert LogContext.get_all()["label"] == "A1"
        assert "command" not in LogContext.get_all()

    def test_additive_set(self):
        LogContext.set(correlation_id="a")
        LogContext.set(machine_id="b")
        ctx = LogContext.get_all()
        assert ctx["correlation_id"] == "a"
        assert ctx["machine_id"] == "b"

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            machine_id="m",
            command="purchase",
            label="A1",
        )
        ctx = LogContext.get_all()
        assert len(ctx) == 4
        assert ctx["correlation_id"] == "c"
        assert ctx["label"] == "A1"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        root = logging.getLogger("vending_kernel")
        assert h1 in root.handlers
        assert h2 not in root.handlers

    def test_get_logger_returns_child(self):
        logger = get_logger("services.money")
        assert logger.name == "vending_kernel.services.money"

    def test_logger_hierarchy(self):
        """Child loggers inherit the vending_kernel root config."""
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        child = get_logger("deep.nested.module")
        child.debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "vending_kernel.deep.nested.module"

    def test_reset_clears_handlers(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        reset_logging()
        root = logging.getLogger("vending_kernel")
        assert root.handlers == []
        assert root.level == logging.WARNING
