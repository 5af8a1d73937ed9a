# src/config/preferences.py — v1
"""Per-note-type persistence of KitSettings.

Each setting is stored under ``{base_key}_{note_type}`` in the
preferences namespace, one JSON scalar per key.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sentencekit.cache.base_cache_store import BaseKeyValueStore
from sentencekit.core.models import IGNORE, KitSettings

logger = logging.getLogger(__name__)

PREFS_NAMESPACE = "immersive_kit_prefs"

# model field -> (stored base key, default)
_PREFERENCE_KEYS: dict[str, tuple[str, Any]] = {
    "exact_search": ("exact_search", False),
    "highlighting": ("highlighting", True),
    "include_anime": ("anime", False),
    "include_drama": ("drama", True),
    "include_games": ("games", False),
    "bundle_media": ("bundle_media", False),
    "keyword_field": ("keyword_field", IGNORE),
    "keyword_reading_field": ("keyword_furigana_field", IGNORE),
    "sentence_field": ("sentence_field", IGNORE),
    "translation_field": ("translation_field", IGNORE),
    "picture_field": ("picture_field", IGNORE),
    "audio_field": ("audio_field", IGNORE),
    "source_field": ("source_field", IGNORE),
    "prev_sentence_field": ("prev_sentence_field", IGNORE),
    "next_sentence_field": ("next_sentence_field", IGNORE),
}


def note_type_key(base_key: str, note_type: int) -> str:
    return f"{base_key}_{note_type}"


class PreferenceStore:
    """Load and save KitSettings for a note type."""

    def __init__(self, store: BaseKeyValueStore) -> None:
        self._store = store

    async def load(self, note_type: int) -> KitSettings:
        """Stored settings for ``note_type``, defaults where unset."""
        values: dict[str, Any] = {"note_type": note_type}
        for field_name, (base_key, default) in _PREFERENCE_KEYS.items():
            raw = await self._store.get(note_type_key(base_key, note_type))
            values[field_name] = _decode(raw, default)

        # A stored picture/audio collision is unusable; drop the audio slot.
        if values["picture_field"] != IGNORE and values["picture_field"] == values["audio_field"]:
            logger.warning(
                "Note type %s maps picture and audio to %r; ignoring audio",
                note_type, values["audio_field"],
            )
            values["audio_field"] = IGNORE
        return KitSettings(**values)

    async def save(self, note_type: int, settings: KitSettings) -> None:
        for field_name, (base_key, _) in _PREFERENCE_KEYS.items():
            await self._store.put(
                note_type_key(base_key, note_type),
                json.dumps(getattr(settings, field_name), ensure_ascii=False),
            )


def _decode(raw: str | None, default: Any) -> Any:
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Undecodable preference value %r", raw)
        return default
    if type(value) is not type(default):
        return default
    return value
