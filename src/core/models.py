# src/core/models.py — v1
"""Core domain models: KitSettings, Example, Record, download results.

KitSettings and Example are immutable once built. Record is owned by the
caller and mutated in place by the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

IGNORE = "Ignore"
LOCKED_TAG = "Locked"

SourceCategory = Literal["drama", "anime", "games"]


class KitSettings(BaseModel):
    """Per-note-type search filters and logical field mappings."""

    model_config = ConfigDict(frozen=True)

    note_type: int = -1

    # Search filters
    exact_search: bool = False
    highlighting: bool = True
    include_drama: bool = True
    include_anime: bool = False
    include_games: bool = False
    bundle_media: bool = False

    # Logical field slots (field name or IGNORE)
    keyword_field: str = IGNORE
    keyword_reading_field: str = IGNORE
    sentence_field: str = IGNORE
    translation_field: str = IGNORE
    picture_field: str = IGNORE
    audio_field: str = IGNORE
    source_field: str = IGNORE
    prev_sentence_field: str = IGNORE
    next_sentence_field: str = IGNORE

    @model_validator(mode="after")
    def validate_media_fields_distinct(self) -> KitSettings:
        """Picture and audio downloads must target different fields."""
        if (
            self.picture_field != IGNORE
            and self.picture_field == self.audio_field
        ):
            raise ValueError(
                f"picture_field and audio_field both map to {self.picture_field!r}"
            )
        return self

    @property
    def allowed_categories(self) -> frozenset[str]:
        """Source categories enabled by the drama/anime/games flags."""
        allowed: set[str] = set()
        if self.include_anime:
            allowed.add("anime")
        if self.include_drama:
            allowed.add("drama")
        if self.include_games:
            allowed.add("games")
        return frozenset(allowed)


class Example(BaseModel):
    """One candidate sentence returned by the search endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    sentence_with_furigana: str = ""
    translation: str = ""
    title: str = ""
    sound: str = ""
    image: str = ""

    @property
    def source_category(self) -> str:
        """Coarse source grouping encoded as the id prefix (``anime_123``)."""
        return self.id.split("_", 1)[0]


@dataclass
class Record:
    """Note being enriched: parallel field name/value lists plus tags."""

    field_names: list[str]
    field_values: list[str]
    tags: set[str] = field(default_factory=set)
    note_type: int = -1
    record_id: str = ""

    def __post_init__(self) -> None:
        if len(self.field_names) != len(self.field_values):
            raise ValueError("field_names and field_values must have equal length")

    @classmethod
    def from_pairs(
        cls,
        pairs: list[tuple[str, str]],
        tags: set[str] | None = None,
        note_type: int = -1,
        record_id: str = "",
    ) -> Record:
        return cls(
            field_names=[name for name, _ in pairs],
            field_values=[value for _, value in pairs],
            tags=set(tags or ()),
            note_type=note_type,
            record_id=record_id,
        )

    @property
    def is_locked(self) -> bool:
        return LOCKED_TAG in self.tags

    def get(self, name: str) -> str | None:
        """Return the value of field ``name`` or None if absent."""
        try:
            return self.field_values[self.field_names.index(name)]
        except ValueError:
            return None

    def as_dict(self) -> dict[str, str]:
        return dict(zip(self.field_names, self.field_values))


class DownloadResult(BaseModel):
    """Outcome of a single media download."""

    file_name: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.file_name is not None

    @classmethod
    def failed(cls, error: str) -> DownloadResult:
        return cls(error=error)


class ArchivePaths(BaseModel):
    """File names extracted from a bundled media archive."""

    picture: str | None = None
    audio: str | None = None


class ContextSentences(BaseModel):
    """Sentences surrounding an example in its source."""

    previous: str = ""
    next: str = ""


class TitleMeta(BaseModel):
    """Media location metadata for one source title."""

    title: str = ""
    category: str = ""


OutcomeStatus = Literal[
    "updated",
    "partial",
    "invalid_sentence",
    "locked",
    "missing_mapping",
    "no_examples",
    "failed",
]


class EnrichmentOutcome(BaseModel):
    """Terminal result of one enrichment invocation."""

    status: OutcomeStatus
    message: str
    example_id: str | None = None
    picture: DownloadResult | None = None
    audio: DownloadResult | None = None

    @property
    def succeeded(self) -> bool:
        """True when the text fields were written."""
        return self.status in ("updated", "partial")
