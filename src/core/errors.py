# src/core/errors.py — v1
"""Enrichment error taxonomy.

Every error carries the user-facing message and the outcome status the
orchestrator reports for it. Network and parse failures are not raised:
the HTTP layer returns None and callers fall back locally.
"""

from __future__ import annotations

from sentencekit.core.models import OutcomeStatus


class EnrichmentError(Exception):
    """Base class for pipeline errors that end an invocation."""

    status: OutcomeStatus = "failed"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class LockedRecordError(EnrichmentError):
    """Record carries the blocking tag; the pipeline never starts."""

    status: OutcomeStatus = "locked"

    def __init__(self, message: str = "Card is locked") -> None:
        super().__init__(message)


class MissingRequiredMappingError(EnrichmentError):
    """Keyword or sentence logical field cannot be resolved."""

    status: OutcomeStatus = "missing_mapping"

    def __init__(self, slot: str, detail: str = "is set to Ignore") -> None:
        self.slot = slot
        super().__init__(f"{slot.capitalize()} field {detail}")


class NoExamplesFoundError(EnrichmentError):
    """Neither the API nor the cache produced a usable example."""

    status: OutcomeStatus = "no_examples"

    def __init__(self, message: str = "No examples found") -> None:
        super().__init__(message)


class InvalidSentenceError(EnrichmentError):
    """Chosen sentence is identical to the one already on the record."""

    status: OutcomeStatus = "invalid_sentence"

    def __init__(self, message: str = "Invalid sentence") -> None:
        super().__init__(message)
