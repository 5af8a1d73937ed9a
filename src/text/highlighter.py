# src/text/highlighter.py — v1
"""Keyword highlighting inside furigana-annotated sentences.

Sentences carry readings inline as ``漢字[かんじ]``. The keyword is located
through an ordered list of match strategies, from the most specific
(whole ideograph compound plus its reading) to the loosest (bare
ideographs anywhere). The first strategy that changes the sentence wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

HIGHLIGHT_TAG = "u"

# CJK Unified Ideographs + Extension A
_IDEOGRAPH = "\u3400-\u4dbf\u4e00-\u9fff"
_NON_IDEOGRAPH_RE = re.compile(f"[^{_IDEOGRAPH}]")
_NON_WORD_RE = re.compile(r"[\W_]")


@dataclass(frozen=True)
class MatchKeys:
    """Normalized search keys derived from the keyword and its reading."""

    plain: str
    ideographs: str
    reading: str


@dataclass(frozen=True)
class MatchStrategy:
    """One highlighting tier: builds a pattern from the keys or opts out."""

    name: str
    build: Callable[[MatchKeys], re.Pattern[str] | None]


def _compound_with_reading(keys: MatchKeys) -> re.Pattern[str] | None:
    # Not directly after "]" so an adjacent annotation block is not re-wrapped.
    if not keys.plain:
        return None
    return re.compile(
        r"(?<!\])"
        f"([{_IDEOGRAPH}]*{re.escape(keys.plain)}[{_IDEOGRAPH}]*)"
        r"(\[[^\]]*\])?"
    )


def _ideographs_with_reading(keys: MatchKeys) -> re.Pattern[str] | None:
    if not keys.ideographs:
        return None
    return re.compile(f"{re.escape(keys.ideographs)}" r"\[[^\]]+\]")


def _exact_reading(keys: MatchKeys) -> re.Pattern[str] | None:
    if not keys.reading or keys.reading == keys.plain:
        return None
    return re.compile(re.escape(keys.reading))


def _plain_outside_brackets(keys: MatchKeys) -> re.Pattern[str] | None:
    if not keys.plain:
        return None
    return re.compile(r"(?<!\[)" f"{re.escape(keys.plain)}" r"(?![^\[]*\])")


def _ideographs_anywhere(keys: MatchKeys) -> re.Pattern[str] | None:
    if not keys.ideographs:
        return None
    return re.compile(re.escape(keys.ideographs))


STRATEGIES: tuple[MatchStrategy, ...] = (
    MatchStrategy("compound_with_reading", _compound_with_reading),
    MatchStrategy("ideographs_with_reading", _ideographs_with_reading),
    MatchStrategy("exact_reading", _exact_reading),
    MatchStrategy("plain_outside_brackets", _plain_outside_brackets),
    MatchStrategy("ideographs_anywhere", _ideographs_anywhere),
)


def normalize_keys(keyword: str, reading: str) -> MatchKeys:
    """Cut both inputs at the first comma and strip keyword punctuation."""
    plain = _NON_WORD_RE.sub("", keyword.split(",", 1)[0]).strip()
    return MatchKeys(
        plain=plain,
        ideographs=_NON_IDEOGRAPH_RE.sub("", plain),
        reading=reading.split(",", 1)[0].strip(),
    )


def _wrap(match: re.Match[str]) -> str:
    return f"<{HIGHLIGHT_TAG}>{match.group(0)}</{HIGHLIGHT_TAG}>"


def stylize(
    sentence: str,
    keyword: str,
    reading: str,
    enabled: bool,
    strategies: tuple[MatchStrategy, ...] = STRATEGIES,
) -> str:
    """Wrap the keyword occurrences in ``sentence`` with ``<u>`` tags.

    Args:
        sentence: Sentence with inline ``[reading]`` annotations.
        keyword: Keyword field value (only the text before a comma is used).
        reading: Reading field value (only the text before a comma is used).
        enabled: When False the sentence is returned untouched.
        strategies: Ordered match tiers.

    Returns:
        Highlighted sentence, or ``sentence`` verbatim if no tier matched.
    """
    if not enabled:
        return sentence

    keys = normalize_keys(keyword, reading)
    for strategy in strategies:
        pattern = strategy.build(keys)
        if pattern is None:
            continue
        stylized = pattern.sub(_wrap, sentence)
        if stylized != sentence:
            return stylized
    return sentence


def matching_strategy(
    sentence: str,
    keyword: str,
    reading: str,
    strategies: tuple[MatchStrategy, ...] = STRATEGIES,
) -> str | None:
    """Name of the tier ``stylize`` would apply, or None."""
    keys = normalize_keys(keyword, reading)
    for strategy in strategies:
        pattern = strategy.build(keys)
        if pattern is not None and pattern.sub(_wrap, sentence) != sentence:
            return strategy.name
    return None
