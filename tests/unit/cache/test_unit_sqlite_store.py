# tests/unit/cache/test_unit_sqlite_store.py — v2
"""Tests for cache/sqlite_store.py."""

from __future__ import annotations

import pytest

from sentencekit.cache.sqlite_store import SqliteKeyValueStore


@pytest.fixture
def store(tmp_path):
    s = SqliteKeyValueStore(tmp_path / "kv.db", "immersive_kit_api_cache")
    yield s
    s.close()


class TestSqliteKeyValueStore:
    @pytest.mark.asyncio
    async def test_put_get(self, store):
        await store.put("k", "v")
        assert await store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_upsert(self, store):
        await store.put("k", "v1")
        await store.put("k", "v2")
        assert await store.get("k") == "v2"
        assert await store.keys() == ["k"]

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.put("k", "v")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_shared_db_separate_namespaces(self, tmp_path):
        a = SqliteKeyValueStore(tmp_path / "kv.db", "a")
        b = SqliteKeyValueStore(tmp_path / "kv.db", "b")
        try:
            await a.put("k", "a-value")
            await b.put("k", "b-value")
            assert await a.get("k") == "a-value"
            assert await b.get("k") == "b-value"
        finally:
            a.close()
            b.close()
