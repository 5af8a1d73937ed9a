# src/logging/logger.py — v3
"""Logger setup for the ``sentencekit`` hierarchy.

Every handler installed here carries a ContextFilter, which stamps the
current record id, note type and orchestrator step onto each LogRecord.
Formatters then read those attributes instead of the context variables,
so a record formatted later (or on another thread) keeps its context.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from sentencekit.logging.context import get_context

ROOT_LOGGER = "sentencekit"
_CONTEXT_ATTRS = ("record_id", "note_type", "step")

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


class ContextFilter(logging.Filter):
    """Copy the logging context onto the record (never filters anything out)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_context()
        for attr in _CONTEXT_ATTRS:
            if not hasattr(record, attr):
                setattr(record, attr, getattr(ctx, attr))
        return True


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        attr: getattr(record, attr)
        for attr in _CONTEXT_ATTRS
        if getattr(record, attr, None) is not None
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line; non-ASCII text is kept as is."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = _record_context(record)
        if context:
            entry["context"] = context

        # structured payload passed as extra={"data": ...}
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """``2024-01-01 12:00:00 [INFO    ] name [note_1] (select) - message``"""

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        parts = [self.formatTime(record, self.datefmt), f"[{record.levelname:8s}]", record.name]
        context = _record_context(record)
        if "record_id" in context:
            parts.append(f"[{context['record_id']}]")
        if "step" in context:
            parts.append(f"({context['step']})")
        parts.append(f"- {record.getMessage()}")

        line = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Child of the ``sentencekit`` logger. Configure with setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    if log_format == "text":
        return TextFormatter()
    raise ValueError(f"Unknown log format: {log_format!r}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> logging.Logger:
    """(Re)configure the ``sentencekit`` logger.

    Calling it again replaces the previously installed handlers.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text".
        log_file: Optional rotating log file next to stdout.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.

    Returns:
        The configured root logger of the package.
    """
    formatter = _make_formatter(log_format)
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        from sentencekit.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation, retention))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ContextFilter())
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root_logger
