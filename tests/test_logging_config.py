"""
Tests for logging setup.
"""

import io
import json
import logging

import pytest

from pingdom_exporter.logging_config import get_logger, log_error, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_text_format():
    stream = io.StringIO()
    setup_logging("INFO", "text", stream=stream)

    logging.getLogger("pingdom_exporter.test").info("hello")

    assert " - pingdom_exporter.test - INFO - hello" in stream.getvalue()


def test_json_format():
    stream = io.StringIO()
    setup_logging("INFO", "json", stream=stream)

    logging.getLogger("pingdom_exporter.test").warning("hello")

    record = json.loads(stream.getvalue().strip())
    assert record["message"] == "hello"
    assert record["levelname"] == "WARNING"


def test_level_filters():
    stream = io.StringIO()
    setup_logging("WARNING", "text", stream=stream)

    logging.getLogger("pingdom_exporter.test").info("quiet")

    assert stream.getvalue() == ""


def test_structlog_events_use_same_handler():
    stream = io.StringIO()
    setup_logging("DEBUG", "json", stream=stream)

    log_error(get_logger("pingdom_exporter.poller"), ValueError("boom"), "poll_cycle_failed",
              consecutive_failures=2)

    record = json.loads(stream.getvalue().strip())
    assert record["message"] == "poll_cycle_failed"
    assert record["levelname"] == "ERROR"
    assert record["name"] == "pingdom_exporter.poller"
    assert record["error_type"] == "ValueError"
    assert record["error_message"] == "boom"
    assert record["consecutive_failures"] == 2
    assert record["service"] == "pingdom-exporter"
