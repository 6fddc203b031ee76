"""
Tests for the structlog setup.
"""

import logging

import pytest
import structlog

from utilities.logger import build_processors, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging configuration made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_json_renderer_last():
    """Test json format ends with the JSON renderer."""
    processors = build_processors("json")

    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_console_renderer_last():
    """Test console format ends with the console renderer."""
    processors = build_processors("console")

    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_debug_adds_callsite():
    """Test debug mode adds call-site parameters."""
    processors = build_processors("json", debug=True)

    assert any(isinstance(p, structlog.processors.CallsiteParameterAdder) for p in processors)
    assert not any(
        isinstance(p, structlog.processors.CallsiteParameterAdder)
        for p in build_processors("json")
    )


def test_setup_logging_with_file(tmp_path):
    """Test a log file and its directory are created."""
    log_file = tmp_path / "logs" / "api.log"

    setup_logging(log_level="INFO", log_format="json", log_file=str(log_file))
    get_logger("tests").info("Book added", book_id="abc")
    for handler in logging.getLogger().handlers:
        handler.flush()

    contents = log_file.read_text()
    assert '"event": "Book added"' in contents
    assert '"book_id": "abc"' in contents
