"""Tests for logging configuration and formatters."""

import json
import logging

import pytest

from license_scanner.logging import ComponentLoggerAdapter, get_logger
from license_scanner.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from license_scanner.logging.context import clear_log_context, log_context


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def logger():
    """Create a test logger with no handlers."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level changed by configure_logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    formatter = JSONFormatter()
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    log_obj = json.loads(formatter.format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "test"
    assert "timestamp" in log_obj


def test_json_formatter_with_extra_fields(logger):
    """Test JSONFormatter includes extra fields."""
    formatter = JSONFormatter()
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Pattern matched",
        (),
        None,
        extra={"event": "matching.pattern.matched", "matches": 2, "licenses": ["MIT"]},
    )

    log_obj = json.loads(formatter.format(record))

    assert log_obj["event"] == "matching.pattern.matched"
    assert log_obj["matches"] == 2
    assert log_obj["licenses"] == ["MIT"]


def test_json_formatter_no_duplicate_fields(logger):
    """Test that standard record attributes are not copied as extras."""
    formatter = JSONFormatter()
    record = logger.makeRecord(
        "test", logging.INFO, "test.py", 1, "Test message", (), None, extra={"event": "x"}
    )

    log_obj = json.loads(formatter.format(record))

    assert "name" not in log_obj
    assert "lineno" not in log_obj
    assert log_obj["event"] == "x"


def test_timestamp_format_in_json(logger):
    """Test that JSON timestamps are ISO-8601 UTC with milliseconds."""
    formatter = JSONFormatter()
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    timestamp = json.loads(formatter.format(record))["timestamp"]

    assert timestamp.endswith("Z")
    assert "T" in timestamp
    assert len(timestamp) == 24


def test_contextual_filter_adds_static_fields(logger):
    """Test ContextualFilter adds service and environment fields."""
    context_filter = ContextualFilter(environment="test")
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    assert context_filter.filter(record) is True
    assert record.service == SERVICE_NAME
    assert record.environment == "test"


def test_contextual_filter_adds_context_fields(logger):
    """Test ContextualFilter copies fields from the active log context."""
    context_filter = ContextualFilter()

    with log_context(file="LICENSE", license_id="MIT"):
        record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Matching", (), None)
        context_filter.filter(record)

    assert record.file == "LICENSE"
    assert record.license_id == "MIT"


def test_contextual_filter_keeps_record_fields(logger):
    """Test that fields passed via extra win over context fields."""
    context_filter = ContextualFilter()

    with log_context(license_id="MIT"):
        record = logger.makeRecord(
            "test", logging.INFO, "test.py", 1, "Matching", (), None, extra={"license_id": "ISC"}
        )
        context_filter.filter(record)

    assert record.license_id == "ISC"


def test_key_value_formatter_with_extras(logger):
    """Test KeyValueFormatter renders extras as key=value pairs."""
    formatter = KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Loaded licenses",
        (),
        None,
        extra={"event": "library.directory.loaded", "patterns": 42, "directory": "my dir"},
    )

    output = formatter.format(record)

    assert "[INFO]" in output
    assert "Loaded licenses" in output
    assert "event=library.directory.loaded" in output
    assert "patterns=42" in output
    assert 'directory="my dir"' in output


def test_configure_logging_invalid_level():
    """Test configure_logging rejects an invalid log level."""
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="INVALID")


def test_configure_logging_invalid_format():
    """Test configure_logging rejects an invalid format type."""
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="invalid")


def test_configure_logging_json_format(restore_root_logger):
    """Test configure_logging installs a JSON handler."""
    configure_logging(level="DEBUG", format_type="json", environment="test")

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, JSONFormatter)
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_key_value_format(restore_root_logger):
    """Test configure_logging installs a key-value handler."""
    configure_logging(level="warning", format_type="key-value", environment="test")

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, KeyValueFormatter)
    assert restore_root_logger.level == logging.WARNING


class TestGetLogger:
    """Tests for component-tagged loggers."""

    def test_plain_logger_without_component(self):
        """Test that get_logger returns a plain Logger without a component."""
        assert isinstance(get_logger("license_scanner.test"), logging.Logger)

    def test_component_added_to_records(self, caplog):
        """Test that the adapter tags every record with its component."""
        adapter = get_logger("license_scanner.test", component="matching")
        assert isinstance(adapter, ComponentLoggerAdapter)

        with caplog.at_level(logging.INFO, logger="license_scanner.test"):
            adapter.info("Matched", extra={"event": "matching.pattern.matched"})

        record = caplog.records[-1]
        assert record.component == "matching"
        assert record.event == "matching.pattern.matched"
