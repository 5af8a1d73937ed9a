# src/logging/context.py — v2
"""Contextual logging support: record_id, note_type and step for log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set once per enrichment invocation
_record_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "record_id", default=None
)
_note_type: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "note_type", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    record_id: str | None = None
    note_type: int | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        record_id=_record_id.get(),
        note_type=_note_type.get(),
        step=_step.get(),
    )


def set_record_context(record_id: str, note_type: int | None = None) -> None:
    """Set record-level context (called once per invocation)."""
    _record_id.set(record_id)
    _note_type.set(note_type)


def set_step_context(step: str | None) -> None:
    """Set the current orchestrator state."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _record_id.set(None)
    _note_type.set(None)
    _step.set(None)
