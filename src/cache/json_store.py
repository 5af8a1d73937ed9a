# src/cache/json_store.py — v2
"""JSON file-based key-value store (default CACHE_BACKEND=json).

Each namespace is a single JSON object at ``<root>/<namespace>.json``.
Writes rewrite the whole document through a temp file and an atomic
replace, so readers never observe a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from sentencekit.cache.base_cache_store import BaseKeyValueStore

logger = logging.getLogger(__name__)


class JsonKeyValueStore(BaseKeyValueStore):
    """File-backed namespace using one JSON document."""

    def __init__(self, root: Path | str, namespace: str) -> None:
        super().__init__(namespace)
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        safe_namespace = self._namespace.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_namespace}.json"

    async def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    async def put(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    async def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    async def keys(self) -> list[str]:
        return list(self._load())

    def _load(self) -> dict[str, object]:
        path = self.path
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to read store %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring non-object store file %s", path)
            return {}
        return data

    def _dump(self, data: dict[str, object]) -> None:
        path = self.path
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)
