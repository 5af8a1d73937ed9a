# src/text/selector.py — v1
"""Example selection under soft source-category filters."""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence

from sentencekit.core.models import Example


def remove_current_sentence(
    examples: Iterable[Example], current_sentence: str | None
) -> list[Example]:
    """Drop examples whose annotated sentence is already on the record."""
    return [e for e in examples if e.sentence_with_furigana != current_sentence]


def filter_by_category(
    examples: Iterable[Example], allowed_categories: Iterable[str]
) -> list[Example]:
    allowed = set(allowed_categories)
    return [e for e in examples if e.source_category in allowed]


def select(
    examples: Sequence[Example],
    current_sentence: str | None,
    allowed_categories: Iterable[str],
    rng: random.Random | None = None,
) -> Example | None:
    """Pick one example at random, preferring the allowed categories.

    Category filters are a preference: when no remaining example matches
    them, the pick falls back to the whole remaining list.

    Args:
        examples: Candidates from the API or the cache.
        current_sentence: Sentence currently stored on the record.
        allowed_categories: Enabled source categories.
        rng: Random source (module RNG when omitted).

    Returns:
        Chosen example, or None when nothing remains after exclusion.
    """
    choose = rng.choice if rng is not None else random.choice
    remaining = remove_current_sentence(examples, current_sentence)
    if not remaining:
        return None

    preferred = filter_by_category(remaining, allowed_categories)
    return choose(preferred or remaining)
