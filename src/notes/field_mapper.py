# src/notes/field_mapper.py — v1
"""Resolve logical field slots to positions in a record's field list."""

from __future__ import annotations

from collections.abc import Sequence

from sentencekit.core.models import IGNORE

_NULL_VALUE = "null"


def index_of(field_names: Sequence[str], logical_name: str) -> int | None:
    """Position of ``logical_name`` in ``field_names``.

    The ``Ignore`` sentinel never resolves. Matching is exact and
    case-sensitive; an absent name is not an error.
    """
    if logical_name == IGNORE:
        return None
    for i, name in enumerate(field_names):
        if name == logical_name:
            return i
    return None


def apply(
    field_values: list[str],
    field_names: Sequence[str],
    logical_name: str,
    new_value: str,
) -> bool:
    """Write ``new_value`` into the mapped field. Returns True if written."""
    index = index_of(field_names, logical_name)
    if index is None:
        return False
    field_values[index] = new_value
    return True


def clear_null_values(field_values: list[str]) -> int:
    """Blank out literal ``NULL`` placeholders left by deck importers.

    Returns:
        Number of fields cleared.
    """
    cleared = 0
    for i, value in enumerate(field_values):
        if value.lower() == _NULL_VALUE:
            field_values[i] = ""
            cleared += 1
    return cleared
