"""Tests for structured logging system."""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from reelvault.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from reelvault.shared.logging import (
    StructuredFormatter,
    log_file_operation,
    log_operation_error,
    log_operation_start,
    log_operation_success,
    setup_structured_logger,
)


def make_record(level: int = logging.INFO, msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestStructuredFormatter:
    """Test StructuredFormatter JSON output."""

    def test_format_basic_log(self):
        """Test basic log record formatting to JSON."""
        log_data = json.loads(StructuredFormatter().format(make_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test_logger"
        assert log_data["message"] == "Test message"
        assert "timestamp" in log_data

    def test_format_log_with_context(self):
        """Test log record with extra context fields."""
        record = make_record(logging.ERROR, "Error occurred")
        record.error_code = "CACHE_WRITE_FAILED"
        record.context = {"file_path": "/tmp/a.cache"}
        record.operation = "cache_add"

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["error_code"] == "CACHE_WRITE_FAILED"
        assert log_data["context"] == {"file_path": "/tmp/a.cache"}
        assert log_data["operation"] == "cache_add"


class TestSetupStructuredLogger:
    """Test logger configuration."""

    def test_rich_console_handler(self):
        """Test the default console handler is a RichHandler."""
        logger = setup_structured_logger(name="reelvault.test.rich", level="debug")

        assert logger.level == logging.DEBUG
        assert any(isinstance(handler, RichHandler) for handler in logger.handlers)
        assert logger.propagate is False

    def test_plain_console_and_file_handler(self, tmp_path):
        """Test JSON lines are written to the log file."""
        log_file = tmp_path / "reelvault.log"
        logger = setup_structured_logger(
            name="reelvault.test.file",
            level="INFO",
            log_file=str(log_file),
            use_rich_console=False,
        )

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
            handler.close()

        line = log_file.read_text(encoding="utf-8").strip()
        assert json.loads(line)["message"] == "hello"

    def test_repeated_setup_replaces_handlers(self):
        """Test that calling setup twice does not duplicate handlers."""
        setup_structured_logger(name="reelvault.test.repeat")
        logger = setup_structured_logger(name="reelvault.test.repeat")

        assert len(logger.handlers) == 1


class TestOperationHelpers:
    """Test the log_operation_* helpers."""

    @pytest.fixture
    def logger(self):
        logger = logging.getLogger("structured_logging_helpers")
        logger.propagate = True
        return logger

    def test_log_operation_error(self, logger, caplog):
        """Test error logs carry code, context and operation."""
        error = InfrastructureError(
            ErrorCode.CACHE_READ_FAILED,
            "Failed to read",
            ErrorContext(file_path="/tmp/a.cache", operation="cache_get"),
        )

        with caplog.at_level(logging.ERROR, logger=logger.name):
            log_operation_error(logger, error, context={"key": "tt1"})

        record = caplog.records[-1]
        assert record.message == "Failed to read"
        assert record.error_code == "CACHE_READ_FAILED"
        assert record.operation == "cache_get"
        assert record.context["file_path"] == "/tmp/a.cache"
        assert record.context["key"] == "tt1"

    def test_log_operation_start_and_success(self, logger, caplog):
        """Test debug logs for the start and end of an operation."""
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_operation_start(logger, "lookup", {"imdb_id": "tt0368226"})
            log_operation_success(logger, "lookup", 12.5, result_info={"title": "The Room"})

        start, success = caplog.records[-2:]
        assert start.context == {"imdb_id": "tt0368226"}
        assert success.duration_ms == 12.5
        assert success.result_info == {"title": "The Room"}

    def test_failed_file_operation_is_a_warning(self, logger, caplog):
        """Test failed file operations log at WARNING."""
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_file_operation(logger, "delete", "/tmp/a.cache", success=False, error_message="busy")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.context["path"] == "/tmp/a.cache"
        assert record.operation == "cache_file_delete"
