import io
import json
import logging

import pytest
import structlog

from feathers_mcp.shared.observability import (
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from feathers_mcp.shared.observability.logging import (
    STDIO_MODE_ENV,
    add_correlation_id,
    correlation_id_ctx,
    stdio_mode,
)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    token = correlation_id_ctx.set(None)
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)
    correlation_id_ctx.reset(token)


def test_correlation_id_is_created_once(restore_logging):
    first = get_correlation_id()

    assert first
    assert get_correlation_id() == first


def test_set_correlation_id(restore_logging):
    set_correlation_id("req-42")

    assert get_correlation_id() == "req-42"


def test_processor_adds_correlation_id(restore_logging):
    set_correlation_id("req-7")

    event = add_correlation_id(None, "info", {"event": "x"})

    assert event["correlation_id"] == "req-7"


def test_processor_keeps_explicit_correlation_id(restore_logging):
    set_correlation_id("ambient")

    event = add_correlation_id(None, "info", {"event": "x", "correlation_id": "bound"})

    assert event["correlation_id"] == "bound"


def test_stdio_mode_flag(monkeypatch):
    monkeypatch.setenv(STDIO_MODE_ENV, "1")
    assert stdio_mode()

    monkeypatch.setenv(STDIO_MODE_ENV, "0")
    assert not stdio_mode()


def test_setup_logging_emits_json(restore_logging):
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)
    set_correlation_id("req-json")

    get_logger("tests.logging").info("tool_call_completed", status="success")

    line = stream.getvalue().strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "tool_call_completed"
    assert record["status"] == "success"
    assert record["correlation_id"] == "req-json"
    assert record["level"] == "info"
    assert record["logger"] == "tests.logging"


def test_setup_logging_respects_level(restore_logging):
    stream = io.StringIO()
    setup_logging("WARNING", stream=stream)

    get_logger("tests.logging.level").info("hidden")

    assert stream.getvalue() == ""


def test_console_format(restore_logging):
    stream = io.StringIO()
    setup_logging("INFO", stream=stream, log_format="console")

    get_logger("tests.logging.console").info("tool_registered", tool="search_docs")

    output = stream.getvalue()
    assert "tool_registered" in output
    assert "tool=search_docs" in output


def test_unknown_log_format_rejected(restore_logging):
    with pytest.raises(ValueError):
        setup_logging("INFO", stream=io.StringIO(), log_format="xml")
