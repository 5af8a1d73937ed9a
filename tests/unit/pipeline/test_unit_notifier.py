# tests/unit/pipeline/test_unit_notifier.py — v1
"""Tests for pipeline/notifier.py."""

from __future__ import annotations

import logging

from sentencekit.pipeline.notifier import CollectingNotifier, LoggingNotifier, Notifier


class TestCollectingNotifier:
    def test_collects_in_order(self):
        n = CollectingNotifier()
        n.notify("a")
        n.notify("b", is_error=True)
        assert n.messages == [("a", False), ("b", True)]
        assert n.last == "b"

    def test_last_when_empty(self):
        assert CollectingNotifier().last is None

    def test_satisfies_protocol(self):
        assert isinstance(CollectingNotifier(), Notifier)
        assert isinstance(LoggingNotifier(), Notifier)


class TestLoggingNotifier:
    def test_levels(self, caplog):
        caplog.set_level(logging.INFO, logger="sentencekit.pipeline.notifier")
        LoggingNotifier().notify("ok")
        LoggingNotifier().notify("bad", is_error=True)
        levels = [(r.getMessage(), r.levelno) for r in caplog.records]
        assert ("ok", logging.INFO) in levels
        assert ("bad", logging.WARNING) in levels
