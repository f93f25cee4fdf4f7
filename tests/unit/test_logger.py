"""
Unit Tests for the Logging Subsystem
====================================

Test Coverage
-------------
- JSONFormatter output, extras and exceptions
- ColoredFormatter leaves records untouched
- Console format switches derived from Config
- ContextFilter and LogContext propagation
- setup_logging / shutdown_logging lifecycle
"""

import json
import logging
import sys

import pytest

from notifier.logging import LogContext, get_log_context, setup_logging, shutdown_logging
from notifier.logging.logger import (
    LOGGER_CONFIG,
    ColoredFormatter,
    ContextFilter,
    JSONFormatter,
)


def make_record(msg="hello", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="notifier.core.notifier",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
@pytest.mark.logging
class TestJSONFormatter:
    """Test structured output."""

    def test_formats_json_with_extra(self):
        """Test the output is JSON carrying message and extras."""
        # Arrange
        record = make_record(notifier="orders", listener_count=2)

        # Act
        data = json.loads(JSONFormatter().format(record))

        # Assert
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "notifier.core.notifier"
        assert data["location"].endswith(":10")
        assert data["extra"] == {"notifier": "orders", "listener_count": 2}

    def test_includes_exception(self):
        """Test exc_info is rendered into an exception field."""
        # Arrange
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        # Act
        data = json.loads(JSONFormatter().format(record))

        # Assert
        assert "RuntimeError: boom" in data["exception"]

    def test_context_fields_promoted(self):
        """Test context attributes are top-level and N/A values dropped."""
        # Arrange
        record = make_record(component="orders", operation="N/A", correlation_id="abc")

        # Act
        data = json.loads(JSONFormatter().format(record))

        # Assert
        assert data["component"] == "orders"
        assert data["correlation_id"] == "abc"
        assert "operation" not in data

    def test_non_serializable_extra(self):
        """Test unknown objects are stringified instead of failing."""
        # Arrange
        record = make_record(payload=object())

        # Act
        data = json.loads(JSONFormatter().format(record))

        # Assert
        assert data["extra"]["payload"].startswith("<object object")


@pytest.mark.unit
@pytest.mark.logging
class TestColoredFormatter:
    def test_levelname_restored(self):
        """Test coloring does not leak into the record."""
        # Arrange
        record = make_record(level=logging.WARNING)

        # Act
        output = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)

        # Assert
        assert "\033[93m" in output
        assert record.levelname == "WARNING"


@pytest.mark.unit
@pytest.mark.logging
class TestLogContext:
    """Test ContextVar-based context propagation."""

    def test_filter_defaults(self):
        """Test records outside any context get placeholders."""
        # Arrange
        record = make_record()

        # Act
        ContextFilter().filter(record)

        # Assert
        assert record.component == "notifier"
        assert record.operation == "N/A"
        assert record.correlation_id == "N/A"

    def test_filter_uses_context(self):
        """Test records inside a LogContext carry its fields."""
        # Arrange
        record = make_record()

        # Act
        with LogContext(component="orders", operation="checkout", order_id=7):
            ContextFilter().filter(record)

        # Assert
        assert record.component == "orders"
        assert record.operation == "checkout"
        assert record.order_id == 7
        assert len(record.correlation_id) == 8

    def test_context_restored_on_exit(self):
        """Test nested contexts unwind to the outer one."""
        # Act
        with LogContext(component="outer", correlation_id="one"):
            with LogContext(operation="inner", correlation_id="two"):
                inner = get_log_context()
            outer = get_log_context()
        after = get_log_context()

        # Assert
        assert inner["component"] == "outer"
        assert inner["operation"] == "inner"
        assert inner["correlation_id"] == "two"
        assert outer["component"] == "outer"
        assert after == {}

    def test_filter_keeps_explicit_extra(self):
        """Test a field passed via extra wins over the surrounding context."""
        # Arrange
        record = make_record(operation="subscribe")

        # Act
        with LogContext(operation="notify"):
            ContextFilter().filter(record)

        # Assert
        assert record.operation == "subscribe"


@pytest.mark.unit
@pytest.mark.logging
class TestLoggerConfig:
    """Test the console switches derived from Config."""

    def test_json_in_production(self, config_env):
        """Test production selects JSON and no colors when LOG_JSON is unset."""
        # Act
        config_env(ENVIRONMENT="production")

        # Assert
        assert LOGGER_CONFIG.use_json is True
        assert LOGGER_CONFIG.use_colors is False

    def test_text_in_development(self, config_env):
        """Test development keeps text output unless LOG_JSON asks for JSON."""
        # Act
        config_env(ENVIRONMENT="development")

        # Assert
        assert LOGGER_CONFIG.use_json is False

    def test_log_level_from_config(self, config_env):
        # Act
        config_env(LOG_LEVEL="warning")

        # Assert
        assert LOGGER_CONFIG.log_level == logging.WARNING


@pytest.mark.unit
@pytest.mark.logging
class TestSetupLogging:
    """Test the global logging lifecycle."""

    def test_setup_is_idempotent(self):
        """Test repeated setup installs a single handler, shutdown removes it."""
        # Arrange
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level

        try:
            # Act
            setup_logging()
            setup_logging()

            # Assert
            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert any(isinstance(f, ContextFilter) for f in added[0].filters)
        finally:
            shutdown_logging()
            root.setLevel(level)

        assert root.handlers == before

    def test_shutdown_without_setup(self):
        """Test shutdown is a no-op when logging was never set up."""
        # Arrange
        root = logging.getLogger()
        before = list(root.handlers)

        # Act
        shutdown_logging()

        # Assert
        assert root.handlers == before
