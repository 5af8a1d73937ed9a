# src/cache/base_cache_store.py — v2
"""Abstract namespaced key-value store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseKeyValueStore(ABC):
    """Unified interface for persistent string key-value backends.

    One instance serves exactly one namespace. Writes are last-write-wins;
    entries never expire.
    """

    def __init__(self, namespace: str) -> None:
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value or None."""

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Store ``value``, overwriting any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    @abstractmethod
    async def keys(self) -> list[str]:
        """List all keys in the namespace."""
