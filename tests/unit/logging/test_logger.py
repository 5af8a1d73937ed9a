# tests/unit/logging/test_logger.py — v3
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging

import pytest

from sentencekit.logging.context import clear_context, set_record_context, set_step_context
from sentencekit.logging.logger import (
    ContextFilter,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    record.__dict__.update(extra)
    ContextFilter().filter(record)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_record_context("note_1", 42)
        set_step_context("select")
        parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"] == {"record_id": "note_1", "note_type": 42, "step": "select"}

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record(data={"examples": 3})))
        assert parsed["data"] == {"examples": 3}

    def test_non_ascii_kept(self):
        output = JsonFormatter().format(_record("食べる"))
        assert "食べる" in output


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_includes_record_and_step(self):
        set_record_context("note_9")
        set_step_context("fetch_media")
        output = TextFormatter().format(_record())
        assert "[note_9]" in output
        assert "(fetch_media)" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "sentencekit.test_module"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger("sentencekit")
        saved = (root.level, list(root.handlers))
        yield
        root.setLevel(saved[0])
        root.handlers = saved[1]

    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("sentencekit")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("sentencekit")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("sentencekit").handlers) == 1

    def test_with_log_file(self, tmp_path):
        setup_logging(log_file=str(tmp_path / "logs" / "kit.log"))
        root = logging.getLogger("sentencekit")
        assert len(root.handlers) == 2
        for handler in root.handlers[1:]:
            handler.close()

    def test_quiets_httpx(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown log format"):
            setup_logging(log_format="xml")

    def test_handlers_carry_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        set_record_context("note_7", 1)
        try:
            get_logger("test").info("ping")
        finally:
            clear_context()
        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert json.loads(line)["context"] == {"record_id": "note_7", "note_type": 1}


class TestContextFilter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_keeps_explicit_attributes(self):
        set_record_context("ctx")
        record = logging.makeLogRecord({"msg": "m", "record_id": "explicit"})
        assert ContextFilter().filter(record) is True
        assert record.record_id == "explicit"
        assert record.step is None
