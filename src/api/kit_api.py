# src/api/kit_api.py — v2
"""Remote example-sentence service: search, context and title metadata.

All methods degrade to None / empty values instead of raising; the
orchestrator decides how to fall back.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from sentencekit.core.models import ContextSentences, Example, TitleMeta
from sentencekit.http.remote_client import RemoteClient

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://apiv2.immersionkit.com"
DEFAULT_MEDIA_BASE_URL = "https://us-southeast-1.linodeobjects.com/immersionkit"


class KitApi:
    """Thin wrapper around the search, context and index_meta endpoints."""

    def __init__(
        self,
        client: RemoteClient,
        base_url: str = DEFAULT_API_BASE_URL,
        media_base_url: str = DEFAULT_MEDIA_BASE_URL,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._media_base_url = media_base_url.rstrip("/")

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def search_url(self, keyword: str, exact: bool = False) -> str:
        params = {"q": keyword}
        if exact:
            params["exactMatch"] = "true"
        return str(httpx.URL(f"{self._base_url}/search", params=params))

    def context_url(self, sentence_id: str) -> str:
        return str(
            httpx.URL(
                f"{self._base_url}/sentence_with_context",
                params={"sentenceId": sentence_id},
            )
        )

    def media_url(self, meta: TitleMeta, filename: str) -> str:
        """Location of an example's audio or image file."""
        return (
            f"{self._media_base_url}/media/{meta.category}/{meta.title}"
            f"/media/{filename}"
        )

    def bundle_url(self, example: Example) -> str:
        """Location of the archive bundling an example's media."""
        return str(
            httpx.URL(
                f"{self._base_url}/download_sentence",
                params={"id": example.id, "modelType": example.source_category},
            )
        )

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def search(self, keyword: str, exact: bool = False) -> list[Example] | None:
        """Search examples for ``keyword``.

        Returns:
            Parsed examples (possibly empty), or None if the request or
            the response body failed.
        """
        payload = await self._client.fetch_json(self.search_url(keyword, exact))
        if not isinstance(payload, dict):
            return None
        return parse_examples(payload.get("examples"))

    async def fetch_context(self, sentence_id: str) -> ContextSentences:
        """Sentence right before and right after ``sentence_id``."""
        if not sentence_id:
            return ContextSentences()
        payload = await self._client.fetch_json(self.context_url(sentence_id))
        if not isinstance(payload, dict):
            return ContextSentences()

        # anything but a list counts as no context
        pretext = _list_of(payload.get("pretext_sentences"))
        posttext = _list_of(payload.get("posttext_sentences"))
        return ContextSentences(
            previous=_sentence_of(pretext[-1]) if pretext else "",
            next=_sentence_of(posttext[0]) if posttext else "",
        )

    async def fetch_index_meta(self) -> dict[str, TitleMeta] | None:
        """Title -> media location metadata for every indexed source."""
        payload = await self._client.fetch_json(f"{self._base_url}/index_meta")
        if not isinstance(payload, dict):
            return None
        data = payload.get("data", payload)
        if not isinstance(data, dict):
            return None

        index: dict[str, TitleMeta] = {}
        for key, value in data.items():
            if not isinstance(value, dict):
                continue
            try:
                index[key] = TitleMeta.model_validate(value)
            except ValidationError as e:
                logger.debug("Skipping metadata for %s: %s", key, e)
        return index


def _list_of(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _sentence_of(item: Any) -> str:
    if isinstance(item, dict):
        value = item.get("sentence_with_furigana", "")
        return value if isinstance(value, str) else ""
    return ""


def parse_examples(raw: Any) -> list[Example]:
    """Validate a raw JSON array into examples, skipping malformed items."""
    if not isinstance(raw, list):
        return []
    examples: list[Example] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            examples.append(Example.model_validate(item))
        except ValidationError as e:
            logger.debug("Skipping malformed example: %s", e)
    return examples


def serialize_examples(examples: list[Example]) -> str:
    """Cache representation: a JSON array of example objects."""
    return json.dumps(
        [e.model_dump() for e in examples], ensure_ascii=False
    )


def deserialize_examples(text: str | None) -> list[Example]:
    """Inverse of serialize_examples; malformed text yields []."""
    if not text:
        return []
    try:
        return parse_examples(json.loads(text))
    except json.JSONDecodeError as e:
        logger.warning("Discarding malformed cached examples: %s", e)
        return []
