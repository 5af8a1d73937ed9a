# tests/conftest.py — v3
"""Shared test fixtures for all unit and integration tests.

Provides a fake example service behind httpx.MockTransport, sample
examples, records and temp-directory stores. No network access.
"""

from __future__ import annotations

import io
import json
import random
import struct
import zipfile
from pathlib import Path
from typing import Any

import httpx
import pytest

from sentencekit.api.kit_api import KitApi
from sentencekit.api.meta_cache import MetadataCache
from sentencekit.cache.json_store import JsonKeyValueStore
from sentencekit.core.models import Example, KitSettings, Record
from sentencekit.http.remote_client import RemoteClient
from sentencekit.media.fetcher import MediaFetcher
from sentencekit.pipeline.orchestrator import EnrichmentOrchestrator

API_BASE = "https://api.test"
MEDIA_BASE = "https://media.test/kit"


# === FAKE REMOTE SERVICE ===


class FakeKitService:
    """In-memory stand-in for the example API and the media host."""

    def __init__(self) -> None:
        self.examples: list[dict[str, Any]] = []
        self.search_status = 200
        self.search_body: bytes | None = None
        self.contexts: dict[str, dict[str, Any]] = {}
        self.meta: dict[str, dict[str, str]] = {}
        self.meta_status = 200
        self.media: dict[str, bytes] = {}
        self.bundle: bytes | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = request.url
        if url.host == "api.test":
            if url.path == "/search":
                if self.search_status != 200:
                    return httpx.Response(self.search_status)
                if self.search_body is not None:
                    return httpx.Response(200, content=self.search_body)
                return httpx.Response(200, json={"examples": self.examples})
            if url.path == "/sentence_with_context":
                context = self.contexts.get(url.params.get("sentenceId", ""))
                if context is None:
                    return httpx.Response(404)
                return httpx.Response(200, json=context)
            if url.path == "/index_meta":
                if self.meta_status != 200:
                    return httpx.Response(self.meta_status)
                return httpx.Response(200, json={"data": self.meta})
            if url.path == "/download_sentence" and self.bundle is not None:
                return httpx.Response(200, content=self.bundle)
        if url.host == "media.test":
            body = self.media.get(url.path)
            if body is not None:
                return httpx.Response(200, content=body)
        return httpx.Response(404)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def add_media(self, category: str, title: str, filename: str, body: bytes) -> None:
        self.media[f"/kit/media/{category}/{title}/media/{filename}"] = body


def make_archive(
    files: dict[str, bytes],
    manifest: dict[str, str] | None,
    corrupt: str | None = None,
) -> bytes:
    """Build an in-memory media archive.

    ``corrupt`` names an entry stored deflated whose compressed data is
    then overwritten, so the archive opens but that entry cannot be read.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, body in files.items():
            method = zipfile.ZIP_DEFLATED if name == corrupt else zipfile.ZIP_STORED
            zf.writestr(name, body, compress_type=method)
        if manifest is not None:
            zf.writestr("media", json.dumps(manifest))
    data = buffer.getvalue()
    if corrupt is None:
        return data

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo(corrupt)
    # local header: 30 fixed bytes, then name and extra field
    name_len, extra_len = struct.unpack_from("<HH", data, info.header_offset + 26)
    start = info.header_offset + 30 + name_len + extra_len
    garbled = bytearray(data)
    # 0xff opens a deflate block of the reserved type 3
    garbled[start:start + info.compress_size] = b"\xff" * info.compress_size
    return bytes(garbled)


# === FIXTURES: Remote ===


@pytest.fixture
def kit_service() -> FakeKitService:
    return FakeKitService()


@pytest.fixture
def remote_client(kit_service: FakeKitService) -> RemoteClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(kit_service.handler),
        follow_redirects=False,
    )
    return RemoteClient(client=http_client)


@pytest.fixture
def kit_api(remote_client: RemoteClient) -> KitApi:
    return KitApi(remote_client, base_url=API_BASE, media_base_url=MEDIA_BASE)


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_example() -> Example:
    return Example(
        id="anime_1",
        sentence_with_furigana="食べる[たべる]のが好き",
        translation="I like to eat",
        title="X",
        sound="x_1.mp3",
        image="x_1.jpg",
    )


@pytest.fixture
def kit_settings() -> KitSettings:
    """Keyword/sentence/translation mapped, every filter off."""
    return KitSettings(
        exact_search=False,
        highlighting=True,
        include_drama=False,
        include_anime=False,
        include_games=False,
        keyword_field="Entry",
        sentence_field="Sentence",
        translation_field="Translation",
    )


@pytest.fixture
def sample_record() -> Record:
    return Record.from_pairs(
        [("Entry", "食べる,たべる"), ("Sentence", ""), ("Translation", "")],
        record_id="note_001",
    )


# === FIXTURES: Storage and orchestration ===


@pytest.fixture
def cache_store(tmp_path: Path) -> JsonKeyValueStore:
    return JsonKeyValueStore(tmp_path / "store", "immersive_kit_api_cache")


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    return tmp_path / "media"


@pytest.fixture
def orchestrator(
    kit_api: KitApi,
    remote_client: RemoteClient,
    cache_store: JsonKeyValueStore,
    media_dir: Path,
) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(
        api=kit_api,
        cache_store=cache_store,
        media_fetcher=MediaFetcher(remote_client),
        meta_cache=MetadataCache(kit_api),
        media_dir=media_dir,
        rng=random.Random(0),
    )


@pytest.fixture
def archive_factory():
    """Callable building archive bytes from entries and a manifest."""
    return make_archive
