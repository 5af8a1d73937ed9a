# src/cache/cache_factory.py — v3
"""Factory for key-value store instantiation."""

from __future__ import annotations

from sentencekit.cache.base_cache_store import BaseKeyValueStore
from sentencekit.config.settings import Settings


def create_key_value_store(
    namespace: str, settings: Settings | None = None
) -> BaseKeyValueStore:
    """Instantiate the configured backend for one namespace.

    Args:
        namespace: Store namespace (e.g. the API cache or the preferences).
        settings: Application settings. Defaults to the JSON backend.

    Returns:
        Configured BaseKeyValueStore implementation.
    """
    settings = settings or Settings(_env_file=None)  # type: ignore[call-arg]
    root = settings.storage_path

    if settings.cache_backend == "json":
        from sentencekit.cache.json_store import JsonKeyValueStore
        return JsonKeyValueStore(root=root, namespace=namespace)

    if settings.cache_backend == "sqlite":
        from sentencekit.cache.sqlite_store import SqliteKeyValueStore
        return SqliteKeyValueStore(
            db_path=root / "sentencekit.db", namespace=namespace
        )

    raise ValueError(f"Unsupported cache backend: {settings.cache_backend!r}")
