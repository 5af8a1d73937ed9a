# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

from sentencekit.logging.context import (
    clear_context,
    get_context,
    set_record_context,
    set_step_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.record_id is None
        assert ctx.note_type is None
        assert ctx.step is None

    def test_set_record_context(self):
        set_record_context("note_1", 12)
        ctx = get_context()
        assert ctx.record_id == "note_1"
        assert ctx.note_type == 12

    def test_set_step_context(self):
        set_step_context("highlight")
        assert get_context().step == "highlight"
        set_step_context(None)
        assert get_context().step is None

    def test_as_dict_filters_none(self):
        set_record_context("note_1")
        d = get_context().as_dict()
        assert d == {"record_id": "note_1"}

    def test_clear(self):
        set_record_context("note_1", 3)
        set_step_context("select")
        clear_context()
        ctx = get_context()
        assert ctx.record_id is None
        assert ctx.step is None
