# src/pipeline/orchestrator.py — v2
"""Enrichment orchestrator: fills a record's fields from one example sentence.

States, in order:
  check_lock → build_fingerprint → cache_or_fetch → select → highlight
  → fetch_context → write_text_fields → fetch_media → notify

Every invocation ends in exactly one notification. Pipeline errors and
unexpected exceptions are converted to an EnrichmentOutcome here and
never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from sentencekit.api.kit_api import deserialize_examples, serialize_examples
from sentencekit.cache.fingerprint import compute_fingerprint
from sentencekit.core.errors import (
    EnrichmentError,
    InvalidSentenceError,
    LockedRecordError,
    MissingRequiredMappingError,
    NoExamplesFoundError,
)
from sentencekit.core.models import (
    IGNORE,
    DownloadResult,
    EnrichmentOutcome,
    Example,
    KitSettings,
    Record,
    TitleMeta,
)
from sentencekit.logging.context import set_step_context
from sentencekit.notes.field_mapper import apply, clear_null_values, index_of
from sentencekit.pipeline.notifier import LoggingNotifier, Notifier
from sentencekit.text.highlighter import stylize
from sentencekit.text.selector import select

if TYPE_CHECKING:
    from sentencekit.api.kit_api import KitApi
    from sentencekit.api.meta_cache import MetadataCache
    from sentencekit.cache.base_cache_store import BaseKeyValueStore
    from sentencekit.media.fetcher import MediaFetcher

logger = logging.getLogger(__name__)

# Optional field receiving the chosen example's id
KIT_ID_FIELD = "KitID"

PICTURE_EXTENSION = "jpg"
AUDIO_EXTENSION = "mp3"


def picture_tag(file_name: str) -> str:
    return f'<img src="{file_name}">'


def audio_tag(file_name: str) -> str:
    return f"[sound:{file_name}]"


def first_entry(value: str | None) -> str:
    """Text before the first comma of a field value."""
    if not value:
        return ""
    return value.split(",", 1)[0].strip()


def _media_value(result: DownloadResult, to_tag: Callable[[str], str]) -> str:
    """Field value for a download: its tag, or empty when it failed."""
    if result.file_name is None:
        return ""
    return to_tag(result.file_name)


async def _skipped() -> None:
    return None


class EnrichmentOrchestrator:
    """Run the enrichment state machine for one record at a time.

    Args:
        api: Remote example service.
        cache_store: Example-list cache keyed by search fingerprint.
        media_fetcher: Media download helper.
        meta_cache: Title metadata index used to build media URLs.
        media_dir: Folder receiving downloaded media.
        rng: Random source for example selection.
    """

    def __init__(
        self,
        api: KitApi,
        cache_store: BaseKeyValueStore,
        media_fetcher: MediaFetcher,
        meta_cache: MetadataCache,
        media_dir: Path,
        rng: random.Random | None = None,
    ) -> None:
        self._api = api
        self._cache = cache_store
        self._media = media_fetcher
        self._meta = meta_cache
        self._media_dir = Path(media_dir)
        self._rng = rng

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self,
        record: Record,
        settings: KitSettings,
        notifier: Notifier | None = None,
    ) -> EnrichmentOutcome:
        """Enrich ``record`` in place and report the outcome once.

        Args:
            record: Note to update; its field values are mutated.
            settings: Filters and field mappings for the record's note type.
            notifier: Sink for the terminal message (logs when omitted).

        Returns:
            EnrichmentOutcome describing what happened.
        """
        notifier = notifier or LoggingNotifier()
        try:
            outcome = await self._run(record, settings)
        except EnrichmentError as e:
            logger.info("Enrichment stopped: %s", e.message)
            outcome = EnrichmentOutcome(status=e.status, message=e.message)
        except Exception as e:
            logger.exception("Enrichment failed")
            outcome = EnrichmentOutcome(status="failed", message=f"API Error: {e}")

        set_step_context("notify")
        try:
            notifier.notify(outcome.message, is_error=not outcome.succeeded)
        except Exception:
            logger.exception("Notifier raised while reporting %r", outcome.message)
        finally:
            set_step_context(None)
        return outcome

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    async def _run(self, record: Record, settings: KitSettings) -> EnrichmentOutcome:
        set_step_context("check_lock")
        if record.is_locked:
            raise LockedRecordError()

        keyword, reading, sentence_index = self._resolve_inputs(record, settings)

        set_step_context("build_fingerprint")
        fingerprint = compute_fingerprint(keyword, settings)

        set_step_context("cache_or_fetch")
        examples = await self._cache_or_fetch(keyword, fingerprint, settings)

        set_step_context("select")
        current_sentence = record.field_values[sentence_index]
        example = select(
            examples, current_sentence, settings.allowed_categories, rng=self._rng
        )
        if example is None:
            raise NoExamplesFoundError()
        logger.info("Selected example %s from %d candidates", example.id, len(examples))

        set_step_context("highlight")
        sentence = stylize(
            example.sentence_with_furigana, keyword, reading, settings.highlighting
        )

        set_step_context("fetch_context")
        context = await self._api.fetch_context(example.id)

        set_step_context("write_text_fields")
        if current_sentence == sentence:
            raise InvalidSentenceError()
        names, values = record.field_names, record.field_values
        clear_null_values(values)
        apply(values, names, settings.sentence_field, sentence)
        apply(values, names, settings.translation_field, example.translation)
        apply(values, names, settings.source_field, example.title)
        apply(values, names, settings.prev_sentence_field, context.previous)
        apply(values, names, settings.next_sentence_field, context.next)
        apply(values, names, KIT_ID_FIELD, example.id)

        set_step_context("fetch_media")
        picture, audio = await self._fetch_media(record, settings, example, keyword)
        if picture is not None:
            apply(values, names, settings.picture_field, _media_value(picture, picture_tag))
        if audio is not None:
            apply(values, names, settings.audio_field, _media_value(audio, audio_tag))

        failed = [
            label
            for label, result in (("picture", picture), ("audio", audio))
            if result is not None and not result.ok
        ]
        if failed:
            return EnrichmentOutcome(
                status="partial",
                message=f"Fields updated ({', '.join(failed)} download failed)",
                example_id=example.id,
                picture=picture,
                audio=audio,
            )
        return EnrichmentOutcome(
            status="updated",
            message="Fields updated!",
            example_id=example.id,
            picture=picture,
            audio=audio,
        )

    def _resolve_inputs(
        self, record: Record, settings: KitSettings
    ) -> tuple[str, str, int]:
        """Keyword, reading and sentence index, or a missing-mapping error."""
        indices: dict[str, int] = {}
        for slot, field_name in (
            ("keyword", settings.keyword_field),
            ("sentence", settings.sentence_field),
        ):
            if field_name == IGNORE:
                raise MissingRequiredMappingError(slot)
            index = index_of(record.field_names, field_name)
            if index is None:
                raise MissingRequiredMappingError(
                    slot, f"{field_name!r} is not on this note"
                )
            indices[slot] = index

        keyword = first_entry(record.get(settings.keyword_field))
        if not keyword:
            raise MissingRequiredMappingError("keyword", "is empty")

        reading = ""
        reading_index = index_of(record.field_names, settings.keyword_reading_field)
        if reading_index is not None:
            reading = first_entry(record.field_values[reading_index])

        return keyword, reading, indices["sentence"]

    async def _cache_or_fetch(
        self, keyword: str, fingerprint: str, settings: KitSettings
    ) -> list[Example]:
        """Fresh non-empty API results win, then the cache, else nothing."""
        cached_text, fetched = await asyncio.gather(
            self._cache.get(fingerprint),
            self._api.search(keyword, settings.exact_search),
        )

        if fetched:
            await self._cache.put(fingerprint, serialize_examples(fetched))
            logger.info("Fetched %d examples for %r", len(fetched), keyword)
            return fetched

        cached = deserialize_examples(cached_text)
        if cached:
            logger.info(
                "API returned %s; using %d cached examples",
                "nothing" if fetched is None else "an empty list", len(cached),
            )
            return cached

        raise NoExamplesFoundError("No examples found in api or cache")

    async def _fetch_media(
        self,
        record: Record,
        settings: KitSettings,
        example: Example,
        keyword: str,
    ) -> tuple[DownloadResult | None, DownloadResult | None]:
        """Run picture and audio downloads concurrently; None = not requested."""
        want_picture = index_of(record.field_names, settings.picture_field) is not None
        want_audio = index_of(record.field_names, settings.audio_field) is not None
        if not (want_picture or want_audio):
            return None, None

        if settings.bundle_media:
            try:
                return await self._fetch_bundle(example, keyword, want_picture, want_audio)
            except Exception as e:
                logger.warning("Media archive for %s failed: %s", example.id, e)
                failure = DownloadResult.failed(str(e))
                return (failure if want_picture else None, failure if want_audio else None)

        meta = await self._meta.get(example.title)
        results = await asyncio.gather(
            self._download_one(keyword, meta, example.image, PICTURE_EXTENSION)
            if want_picture else _skipped(),
            self._download_one(keyword, meta, example.sound, AUDIO_EXTENSION)
            if want_audio else _skipped(),
            return_exceptions=True,
        )
        picture, audio = (
            DownloadResult.failed(str(r)) if isinstance(r, BaseException) else r
            for r in results
        )
        return picture, audio

    async def _download_one(
        self,
        keyword: str,
        meta: TitleMeta | None,
        filename: str,
        extension: str,
    ) -> DownloadResult:
        if meta is None:
            return DownloadResult.failed("no title metadata")
        if not filename:
            return DownloadResult.failed(f"example has no {extension} reference")
        url = self._api.media_url(meta, filename)
        return await self._media.download(keyword, url, self._media_dir, extension)

    async def _fetch_bundle(
        self,
        example: Example,
        keyword: str,
        want_picture: bool,
        want_audio: bool,
    ) -> tuple[DownloadResult | None, DownloadResult | None]:
        paths = await self._media.download_archive(
            keyword, self._api.bundle_url(example), self._media_dir
        )

        def _result(name: str | None, label: str) -> DownloadResult:
            if name is None:
                return DownloadResult.failed(f"no {label} in archive")
            return DownloadResult(file_name=name)

        picture = _result(paths.picture if paths else None, "picture") if want_picture else None
        audio = _result(paths.audio if paths else None, "audio") if want_audio else None
        return picture, audio
