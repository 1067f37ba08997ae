"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from tootcomments.shared.errors import ErrorCode, ErrorContext, TootCommentsError
from tootcomments.shared.logging import (
    StructuredFormatter,
    log_api_call,
    log_operation_error,
    log_operation_success,
    setup_structured_logger,
)


@pytest.fixture
def test_logger():
    logger = logging.getLogger("tootcomments.tests.logging")
    logger.setLevel(logging.DEBUG)
    yield logger
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def package_logger():
    return logging.getLogger("tootcomments")


class TestStructuredFormatter:
    def test_emits_json_with_extras(self):
        record = logging.LogRecord(
            "tootcomments.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
        )
        record.operation = "resolve"
        record.context = {"query": "/blog/a"}

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert entry["operation"] == "resolve"
        assert entry["context"] == {"query": "/blog/a"}


class TestSetupStructuredLogger:
    def test_rich_console_handler(self, package_logger):
        logger = setup_structured_logger(level="DEBUG")

        assert logger is package_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.propagate is False

    def test_json_handlers_and_log_file(self, package_logger, temp_dir):
        log_file = temp_dir / "toot.log"

        logger = setup_structured_logger(
            level="INFO",
            log_file=str(log_file),
            use_rich_console=False,
        )
        logging.getLogger("tootcomments.services").info("cache loaded")
        for handler in logger.handlers:
            handler.flush()

        assert all(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers)
        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["message"] == "cache loaded"
        assert entry["logger"] == "tootcomments.services"

    def test_repeated_setup_replaces_handlers(self, package_logger):
        setup_structured_logger(use_rich_console=False)
        logger = setup_structured_logger(use_rich_console=False)

        assert len(logger.handlers) == 1


class TestLogHelpers:
    def test_log_operation_error(self, test_logger, caplog):
        error = TootCommentsError(
            ErrorCode.CACHE_WRITE_FAILED,
            "disk full",
            ErrorContext(operation="persist_root_cache", file_path="roots.json"),
        )

        with caplog.at_level(logging.DEBUG, logger=test_logger.name):
            log_operation_error(test_logger, error, level=logging.WARNING)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "disk full"
        assert record.error_code == "CACHE_WRITE_FAILED"
        assert record.operation == "persist_root_cache"
        assert record.context["file_path"] == "roots.json"

    def test_log_operation_success(self, test_logger, caplog):
        with caplog.at_level(logging.DEBUG, logger=test_logger.name):
            log_operation_success(test_logger, "get_result", 12.5, {"comments": 3})

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.duration_ms == 12.5
        assert record.result_info == {"comments": 3}

    @pytest.mark.parametrize(
        ("status_code", "level"),
        [(200, logging.DEBUG), (404, logging.ERROR), (None, logging.DEBUG)],
    )
    def test_log_api_call_levels(self, test_logger, caplog, status_code, level):
        with caplog.at_level(logging.DEBUG, logger=test_logger.name):
            log_api_call(test_logger, "api/v2/search", status_code=status_code)

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.context["endpoint"] == "api/v2/search"
