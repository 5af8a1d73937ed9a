# src/api/meta_cache.py — v1
"""Fetch-once cache of the title metadata index."""

from __future__ import annotations

import asyncio
import logging

from sentencekit.api.kit_api import KitApi
from sentencekit.core.models import TitleMeta

logger = logging.getLogger(__name__)


class MetadataCache:
    """Lazily loads ``index_meta`` and keeps it for the object's lifetime.

    A successful load happens at most once; a failed load is not
    remembered, so the next lookup retries.
    """

    def __init__(self, api: KitApi) -> None:
        self._api = api
        self._index: dict[str, TitleMeta] | None = None
        self._lock = asyncio.Lock()
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        return self._index is not None

    async def get(self, title: str) -> TitleMeta | None:
        index = await self._ensure_loaded()
        if index is None:
            return None
        meta = index.get(title)
        if meta is None:
            logger.info("No metadata for title %r", title)
        return meta

    async def _ensure_loaded(self) -> dict[str, TitleMeta] | None:
        if self._index is not None:
            return self._index
        async with self._lock:
            if self._index is None:
                index = await self._api.fetch_index_meta()
                if index is None:
                    logger.warning("Title metadata index unavailable")
                    return None
                self._index = index
                self.load_count += 1
                logger.debug("Loaded metadata for %d titles", len(index))
        return self._index
