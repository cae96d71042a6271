"""Tests for the structured logging utilities."""

import logging
import time
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from excel_pdf_converter.utils.logging import (
    LogContext,
    PerformanceMetrics,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_conversion_id,
    get_extra_context,
    get_logger,
    get_request_id,
    set_conversion_id,
    set_extra_context,
    set_request_id,
    timed_operation,
)


def _record(message: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestContextVariables:
    """Tests for context variable management."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_defaults(self) -> None:
        assert get_request_id() is None
        assert get_conversion_id() is None
        assert get_extra_context() == {}

    def test_set_and_get(self) -> None:
        set_request_id("req-123")
        set_conversion_id("conv-456")
        set_extra_context({"sheet": "Report"})

        assert get_request_id() == "req-123"
        assert get_conversion_id() == "conv-456"
        assert get_extra_context() == {"sheet": "Report"}

    def test_clear_context(self) -> None:
        """Clear context should reset all context variables."""
        set_request_id("req-123")
        set_conversion_id("conv-456")
        set_extra_context({"key": "value"})

        clear_context()

        assert get_request_id() is None
        assert get_conversion_id() is None
        assert get_extra_context() == {}


class TestPerformanceMetrics:
    """Tests for PerformanceMetrics class."""

    def test_initialization(self) -> None:
        metrics = PerformanceMetrics(operation="layout")
        assert metrics.operation == "layout"
        assert metrics.duration_seconds == 0.0
        assert metrics.rows_processed == 0
        assert metrics.pages_emitted == 0
        assert metrics.custom_metrics == {}

    def test_finish_calculates_duration(self) -> None:
        metrics = PerformanceMetrics(operation="layout")
        time.sleep(0.01)
        metrics.finish()
        assert metrics.duration_seconds > 0
        assert metrics.end_time is not None

    def test_to_dict_with_all_fields(self) -> None:
        metrics = PerformanceMetrics(operation="layout")
        metrics.duration_seconds = 2.0
        metrics.rows_processed = 120
        metrics.columns_processed = 8
        metrics.pages_emitted = 3
        metrics.images_placed = 1
        metrics.commands_emitted = 900
        metrics.custom_metrics = {"merges": 4}

        result = metrics.to_dict()
        assert result["operation"] == "layout"
        assert result["rows_processed"] == 120
        assert result["columns_processed"] == 8
        assert result["pages_emitted"] == 3
        assert result["images_placed"] == 1
        assert result["commands_emitted"] == 900
        assert result["custom_metrics"]["merges"] == 4

    def test_to_dict_excludes_zero_values(self) -> None:
        """to_dict should exclude zero counters."""
        metrics = PerformanceMetrics(operation="render")
        metrics.duration_seconds = 1.0
        result = metrics.to_dict()
        assert result == {"operation": "render", "duration_seconds": 1.0}


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        assert isinstance(get_logger(__name__), StructuredLogger)
        assert isinstance(self.logger.logger, logging.Logger)

    def test_build_message(self) -> None:
        assert self.logger._build_message("Test message") == "Test message"
        msg = self.logger._build_message("Test message", key="value", count=42)
        assert msg == "Test message | key=value, count=42"

    @patch.object(logging.Logger, "info")
    def test_info_logging(self, mock_info: MagicMock) -> None:
        self.logger.info("Worksheet decoded", rows=10)
        mock_info.assert_called_once()
        assert "rows=10" in mock_info.call_args[0][0]

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        self.logger.warning("Skipping image", image_index=2)
        mock_warning.assert_called_once()

    @patch.object(logging.Logger, "exception")
    def test_exception_logging(self, mock_exception: MagicMock) -> None:
        self.logger.exception("Unexpected error")
        mock_exception.assert_called_once()

    @patch.object(logging.Logger, "info")
    def test_log_performance(self, mock_info: MagicMock) -> None:
        metrics = PerformanceMetrics(operation="layout")
        metrics.pages_emitted = 2
        self.logger.log_performance(metrics)
        call_args = mock_info.call_args[0][0]
        assert "Performance: layout" in call_args
        assert "pages_emitted=2" in call_args

    @patch.object(logging.Logger, "log")
    def test_log_conversion_result_success(self, mock_log: MagicMock) -> None:
        self.logger.log_conversion_result(
            success=True, duration_seconds=0.25, page_count=3, output_bytes=2048
        )
        level, message = mock_log.call_args[0]
        assert level == logging.INFO
        assert "Conversion completed" in message
        assert "page_count=3" in message
        assert "output_bytes=2048" in message

    @patch.object(logging.Logger, "log")
    def test_log_conversion_result_failure(self, mock_log: MagicMock) -> None:
        self.logger.log_conversion_result(
            success=False,
            duration_seconds=0.1,
            page_count=0,
            error_message="Sheet not found",
        )
        level, message = mock_log.call_args[0]
        assert level == logging.ERROR
        assert "error=Sheet not found" in message


class TestLogContext:
    """Tests for LogContext context manager."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_context_sets_values(self) -> None:
        with LogContext(conversion_id="conv-1", sheet="Report"):
            assert get_conversion_id() == "conv-1"
            assert get_extra_context() == {"sheet": "Report"}

    def test_context_restores_values(self) -> None:
        set_conversion_id("original")
        set_extra_context({"original": "value"})

        with LogContext(conversion_id="new", stage="layout"):
            assert get_conversion_id() == "new"
            assert get_extra_context() == {"original": "value", "stage": "layout"}

        assert get_conversion_id() == "original"
        assert get_extra_context() == {"original": "value"}

    def test_context_with_request_id(self) -> None:
        with LogContext(request_id="req-456"):
            assert get_request_id() == "req-456"
        assert get_request_id() is None

    def test_nested_contexts(self) -> None:
        with LogContext(conversion_id="outer"):
            with LogContext(conversion_id="inner"):
                assert get_conversion_id() == "inner"
            assert get_conversion_id() == "outer"

    def test_kwargs_are_not_consumed(self) -> None:
        context = LogContext(conversion_id="conv-1")
        with context:
            pass
        with context:
            assert get_conversion_id() == "conv-1"


class TestTimedOperation:
    """Tests for timed_operation context manager."""

    @patch.object(StructuredLogger, "log_performance")
    def test_timed_operation_logs_metrics(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        with timed_operation(logger, "render") as metrics:
            metrics.pages_emitted = 4

        logged_metrics = mock_log.call_args[0][0]
        assert logged_metrics.operation == "render"
        assert logged_metrics.pages_emitted == 4
        assert logged_metrics.end_time is not None

    @patch.object(StructuredLogger, "log_performance")
    def test_metrics_logged_when_block_raises(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        with pytest.raises(ValueError), timed_operation(logger, "layout"):
            raise ValueError("boom")
        mock_log.assert_called_once()


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_with_string_level(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_int_level(self) -> None:
        configure_logging(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_structured_formatter_by_default(self) -> None:
        configure_logging()
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, StructuredLogFormatter)

    def test_without_structured_formatter(self) -> None:
        configure_logging(use_structured_formatter=False)
        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, StructuredLogFormatter)


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter class."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_format_without_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        assert formatter.format(_record()) == "Test message"

    def test_format_with_ids_and_extra_context(self) -> None:
        set_request_id("req-123")
        set_conversion_id("conv-456")
        set_extra_context({"sheet": "Report"})
        formatter = StructuredLogFormatter("%(message)s")

        result = formatter.format(_record())

        assert result == "[request_id=req-123 conversion_id=conv-456 sheet=Report] Test message"

    def test_record_message_is_restored(self) -> None:
        set_request_id("req-123")
        record = _record()
        StructuredLogFormatter("%(message)s").format(record)
        assert record.msg == "Test message"
