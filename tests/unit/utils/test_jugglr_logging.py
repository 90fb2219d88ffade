"""Tests for logging configuration utilities."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from jugglr.core.notation.mhn.errors import PatternError
from jugglr.core.notation.mhn.models import Hand
from jugglr.core.utils.logging import StructuredJSONFormatter, configure_logging


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="jugglr.test",
        level=logging.INFO,
        pathname="/path/to/pipeline.py",
        lineno=42,
        msg="Compiled %d events",
        args=(4,),
        exc_info=None,
    )
    record.funcName = "compile"
    record.module = "pipeline"
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredJSONFormatter:
    """Test suite for StructuredJSONFormatter."""

    def test_basic_log_format(self):
        data = json.loads(StructuredJSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Compiled 4 events"
        assert "timestamp" in data
        assert data["context"]["logger_name"] == "jugglr.test"
        assert data["context"]["module"] == "pipeline"
        assert data["context"]["function"] == "compile"
        assert data["context"]["line"] == 42

    def test_extra_fields_in_context(self):
        record = make_record(stage="path assignment", paths=3)
        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["context"]["stage"] == "path assignment"
        assert data["context"]["paths"] == 3

    def test_exception_info(self):
        try:
            raise ValueError("bad dwell")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["context"]["error_type"] == "ValueError"
        assert data["context"]["error_message"] == "bad dwell"
        assert "Traceback" in data["context"]["stack_trace"]


    def test_pattern_error_context(self):
        try:
            raise PatternError(reason="Too many objects", beat=5, juggler=1, hand=Hand.RIGHT)
        except PatternError:
            record = make_record()
            record.exc_info = sys.exc_info()

        context = json.loads(StructuredJSONFormatter().format(record))["context"]

        assert context["error_type"] == "PatternError"
        assert context["pattern_reason"] == "Too many objects"
        assert context["pattern_beat"] == 5
        assert context["pattern_juggler"] == 1
        assert context["pattern_hand"] == 0


@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_level(self):
        configure_logging(level="debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "jugglr.log"
        configure_logging(level="INFO", format_string="%(message)s", filename=str(log_file))

        logging.getLogger("jugglr.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.read_text().strip() == "hello"

    def test_structured_file(self, tmp_path):
        log_file = tmp_path / "jugglr.jsonl"
        configure_logging(level="INFO", filename=str(log_file), structured=True)

        logging.getLogger("jugglr.test").warning("slow")
        for handler in logging.getLogger().handlers:
            handler.flush()

        data = json.loads(log_file.read_text().strip())
        assert data["level"] == "WARNING"
        assert data["message"] == "slow"
