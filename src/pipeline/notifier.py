# src/pipeline/notifier.py — v1
"""User-facing notification sink for enrichment outcomes."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Receives the single terminal message of an invocation."""

    def notify(self, message: str, is_error: bool = False) -> None: ...


class LoggingNotifier:
    """Default sink when no UI is attached: writes to the log."""

    def notify(self, message: str, is_error: bool = False) -> None:
        if is_error:
            logger.warning("%s", message)
        else:
            logger.info("%s", message)


class CollectingNotifier:
    """Keeps every message; used by embedding code and tests."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, bool]] = []

    def notify(self, message: str, is_error: bool = False) -> None:
        self.messages.append((message, is_error))

    @property
    def last(self) -> str | None:
        return self.messages[-1][0] if self.messages else None
