"""Structured Logging: tests for JSONFormatter and setup_logging.

Tests cover:
    - base fields always present
    - known extras surfaced, absent ones omitted
    - exceptions serialized
    - setup_logging attaches a handler with the requested format
    - repeated setup replaces the engine handler instead of stacking
    - configure_logging applies LABELGUARD_LOG_LEVEL / LABELGUARD_LOG_FORMAT
"""

import json
import logging
import sys

import pytest

from labelguard.config import Settings
from labelguard.infrastructure.observability import (
    JSONFormatter, configure_logging, setup_logging,
)


def _record(msg="Edit rejected", level=logging.WARNING, exc_info=None, **extra):
    record = logging.LogRecord(
        "labelguard.core.enforce_edits", level, __file__, 1, msg, (), exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "labelguard.core.enforce_edits"
    assert log["message"] == "Edit rejected"
    assert "timestamp" in log


def test_extras_surfaced_when_present():
    log = json.loads(JSONFormatter().format(
        _record(element_id="logo", error_code="UNKNOWN_ELEMENT", valid_count=0),
    ))
    assert log["element_id"] == "logo"
    assert log["error_code"] == "UNKNOWN_ELEMENT"
    assert log["valid_count"] == 0
    assert "edit_op" not in log


def test_exception_serialized():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record(level=logging.ERROR, exc_info=sys.exc_info())
    log = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in log["exception"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize("fmt, formatter_type", [
    ("json", JSONFormatter),
    ("text", logging.Formatter),
])
def test_setup_logging(restore_root_logger, fmt, formatter_type):
    handler = setup_logging("debug", fmt)
    assert handler in restore_root_logger.handlers
    assert isinstance(handler.formatter, formatter_type)
    assert restore_root_logger.level == logging.DEBUG


def test_setup_logging_replaces_previous_handler(restore_root_logger):
    first = setup_logging("info", "json")
    second = setup_logging("warning", "text")
    assert first not in restore_root_logger.handlers
    assert second in restore_root_logger.handlers
    assert restore_root_logger.level == logging.WARNING


def test_configure_logging_uses_explicit_settings(restore_root_logger):
    handler = configure_logging(Settings(log_level="ERROR", log_format="text"))
    assert not isinstance(handler.formatter, JSONFormatter)
    assert restore_root_logger.level == logging.ERROR


def test_configure_logging_reads_environment(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LABELGUARD_LOG_LEVEL", "debug")
    monkeypatch.setenv("LABELGUARD_LOG_FORMAT", "json")
    handler = configure_logging()
    assert isinstance(handler.formatter, JSONFormatter)
    assert restore_root_logger.level == logging.DEBUG
