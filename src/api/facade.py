# src/api/facade.py — v2
"""Public API facade, the single entry point for record enrichment.

Usage:
    from sentencekit.api.facade import enrich
    outcome = await enrich(record)

The caller owns the record; its field values are updated in place.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from sentencekit.api.kit_api import KitApi
from sentencekit.api.meta_cache import MetadataCache
from sentencekit.cache.cache_factory import create_key_value_store
from sentencekit.config.preferences import PreferenceStore
from sentencekit.config.settings import Settings
from sentencekit.core.models import EnrichmentOutcome, KitSettings, Record
from sentencekit.http.remote_client import RemoteClient
from sentencekit.logging.context import clear_context, set_record_context
from sentencekit.logging.logger import setup_logging
from sentencekit.media.fetcher import MediaFetcher
from sentencekit.pipeline.orchestrator import EnrichmentOrchestrator

if TYPE_CHECKING:
    import httpx

    from sentencekit.pipeline.notifier import Notifier

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Apply the logging section of ``settings``."""
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


def build_remote_client(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> RemoteClient:
    return RemoteClient(
        max_redirects=settings.http_max_redirects,
        connect_timeout_s=settings.http_connect_timeout_s,
        read_timeout_s=settings.http_read_timeout_s,
        user_agent=settings.http_user_agent,
        client=http_client,
    )


def build_orchestrator(
    settings: Settings | None = None,
    *,
    client: RemoteClient | None = None,
    rng: random.Random | None = None,
) -> EnrichmentOrchestrator:
    """Wire an orchestrator from application settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        client: Shared RemoteClient. Built from settings if None.
        rng: Random source for example selection.
    """
    settings = settings or Settings()
    client = client or build_remote_client(settings)
    api = KitApi(
        client,
        base_url=settings.api_base_url,
        media_base_url=settings.media_base_url,
    )
    return EnrichmentOrchestrator(
        api=api,
        cache_store=create_key_value_store(settings.cache_namespace, settings),
        media_fetcher=MediaFetcher(client),
        meta_cache=MetadataCache(api),
        media_dir=settings.media_path,
        rng=rng,
    )


async def load_kit_settings(
    note_type: int, settings: Settings | None = None
) -> KitSettings:
    """Stored KitSettings for ``note_type``."""
    settings = settings or Settings()
    prefs = PreferenceStore(create_key_value_store(settings.prefs_namespace, settings))
    return await prefs.load(note_type)


async def save_kit_settings(
    kit_settings: KitSettings, settings: Settings | None = None
) -> None:
    """Persist ``kit_settings`` under its note type."""
    settings = settings or Settings()
    prefs = PreferenceStore(create_key_value_store(settings.prefs_namespace, settings))
    await prefs.save(kit_settings.note_type, kit_settings)


async def enrich(
    record: Record,
    kit_settings: KitSettings | None = None,
    notifier: Notifier | None = None,
    *,
    orchestrator: EnrichmentOrchestrator | None = None,
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> EnrichmentOutcome:
    """Enrich one record end-to-end.

    Args:
        record: Note to update in place.
        kit_settings: Filters and field mappings. Loaded from the stored
            preferences of ``record.note_type`` if None.
        notifier: Sink for the terminal message.
        orchestrator: Reusable orchestrator (keeps its metadata cache).
        settings: Application settings. Loaded from .env if None.
        http_client: Pre-built httpx client for a fresh orchestrator.

    Returns:
        EnrichmentOutcome of the run.
    """
    settings = settings or Settings()
    set_record_context(record.record_id or "-", record.note_type)
    client: RemoteClient | None = None
    try:
        if kit_settings is None:
            kit_settings = await load_kit_settings(record.note_type, settings)
        if orchestrator is None:
            client = build_remote_client(settings, http_client)
            orchestrator = build_orchestrator(settings, client=client)
        return await orchestrator.run(record, kit_settings, notifier)
    finally:
        if client is not None:
            await client.aclose()
        clear_context()
