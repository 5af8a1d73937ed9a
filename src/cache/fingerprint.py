# src/cache/fingerprint.py — v3
"""Deterministic cache key for an example search.

The key joins the keyword with every setting that changes which examples
are returned or how they are rendered, so toggling a filter never serves a
stale list.
"""

from __future__ import annotations

from sentencekit.core.models import KitSettings

FINGERPRINT_SEPARATOR = "|"


def compute_fingerprint(keyword: str | None, settings: KitSettings) -> str:
    """Build the cache key for ``keyword`` searched under ``settings``.

    Args:
        keyword: Normalized search keyword (None renders as ``null``).
        settings: Active per-note-type settings.

    Returns:
        Separator-joined key, e.g. ``食べる|false|true|true|false|false|Entry``.
    """
    parts = [
        _render(keyword),
        _render(settings.exact_search),
        _render(settings.highlighting),
        _render(settings.include_drama),
        _render(settings.include_anime),
        _render(settings.include_games),
        _render(settings.keyword_field),
    ]
    return FINGERPRINT_SEPARATOR.join(parts)


def _render(value: str | bool | None) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
