# tests/unit/api/test_unit_meta_cache.py — v1
"""Tests for api/meta_cache.py — fetch-once title metadata."""

from __future__ import annotations

import asyncio

import pytest

from sentencekit.api.meta_cache import MetadataCache


@pytest.fixture
def meta_cache(kit_api, kit_service) -> MetadataCache:
    kit_service.meta = {"X": {"title": "X", "category": "anime"}}
    return MetadataCache(kit_api)


class TestMetadataCache:
    @pytest.mark.asyncio
    async def test_fetched_once(self, meta_cache, kit_service):
        first = await meta_cache.get("X")
        second = await meta_cache.get("X")
        assert first.category == "anime"
        assert second == first
        assert len(kit_service.requests_to("/index_meta")) == 1
        assert meta_cache.load_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_one_fetch(self, meta_cache, kit_service):
        await asyncio.gather(*(meta_cache.get("X") for _ in range(5)))
        assert len(kit_service.requests_to("/index_meta")) == 1

    @pytest.mark.asyncio
    async def test_unknown_title(self, meta_cache):
        assert await meta_cache.get("Unknown") is None
        assert meta_cache.loaded

    @pytest.mark.asyncio
    async def test_failure_not_memoized(self, meta_cache, kit_service):
        kit_service.meta_status = 500
        assert await meta_cache.get("X") is None
        assert not meta_cache.loaded

        kit_service.meta_status = 200
        meta = await meta_cache.get("X")
        assert meta.title == "X"
        assert len(kit_service.requests_to("/index_meta")) == 2
