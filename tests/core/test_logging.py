"""Tests for the logging helpers with correlation ids."""

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, cast

from pythonjsonlogger import jsonlogger

from action_engine.core.logging import (
    CorrelationIdFilter,
    bind_correlation_id,
    bind_intent_name,
    correlation_id_context,
    get_correlation_id,
    get_intent_name,
    get_logger,
    intent_name_context,
    reset_correlation_id,
    reset_intent_name,
)


def test_correlation_filter_attaches_context():
    """Filter should attach the current correlation id and intent onto log records."""
    cid_token = bind_correlation_id("abc123")
    intent_token = bind_intent_name("assistant.intent.action.MAIN")
    try:
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="hello",
            args=None,
            exc_info=None,
        )
        filt = CorrelationIdFilter()
        assert filt.filter(record) is True
        record_any = cast(Any, record)
        assert record_any.__dict__["correlation_id"] == "abc123"
        assert record_any.__dict__["intent_name"] == "assistant.intent.action.MAIN"
    finally:
        reset_intent_name(intent_token)
        reset_correlation_id(cid_token)


def test_filter_uses_placeholders_when_unbound():
    """Records outside a request carry dash placeholders."""
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
    CorrelationIdFilter().filter(record)
    record_any = cast(Any, record)
    assert record_any.correlation_id == "-"
    assert record_any.intent_name == "-"


def test_context_managers_restore_state():
    """Nested contexts restore the original values."""
    with (
        correlation_id_context("ctx"),
        correlation_id_context("nested"),
        intent_name_context("assistant.intent.action.TEXT"),
    ):
        assert get_correlation_id() == "nested"
        assert get_intent_name() == "assistant.intent.action.TEXT"
    assert get_correlation_id() is None
    assert get_intent_name() is None


def test_get_logger_installs_filtered_json_handlers():
    """Handlers on the logger include the correlation filter and JSON formatter."""
    logger = get_logger("action_engine.tests.logging")
    assert logger.handlers
    assert all(
        any(isinstance(flt, CorrelationIdFilter) for flt in handler.filters)
        for handler in logger.handlers
    )
    assert all(isinstance(handler.formatter, jsonlogger.JsonFormatter) for handler in logger.handlers)


def test_get_logger_does_not_duplicate_handlers():
    """Calling get_logger repeatedly reuses the installed handlers."""
    first = get_logger("action_engine.tests.logging.repeat")
    count = len(first.handlers)
    second = get_logger("action_engine.tests.logging.repeat")

    assert first is second
    assert len(second.handlers) == count
    rotating = [h for h in second.handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
