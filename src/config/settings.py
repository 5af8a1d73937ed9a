# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for endpoints, HTTP limits, storage and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Remote service ===
    api_base_url: str = "https://apiv2.immersionkit.com"
    media_base_url: str = "https://us-southeast-1.linodeobjects.com/immersionkit"

    # === HTTP ===
    http_connect_timeout_s: float = 10.0
    http_read_timeout_s: float = 10.0
    http_max_redirects: int = 5
    http_user_agent: str = "Mozilla/5.0"

    # === Storage ===
    storage_root: Path = Path("~/.sentencekit")
    cache_backend: Literal["json", "sqlite"] = "json"
    cache_namespace: str = "immersive_kit_api_cache"
    prefs_namespace: str = "immersive_kit_prefs"
    media_dir: Path = Path("~/.sentencekit/media")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("http_connect_timeout_s", "http_read_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("HTTP timeouts must be > 0")
        return v

    @field_validator("http_max_redirects")
    @classmethod
    def validate_max_redirects(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("http_max_redirects must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_namespace == self.prefs_namespace:
            errors.append("CACHE_NAMESPACE and PREFS_NAMESPACE must differ")

        if not self.cache_namespace or not self.prefs_namespace:
            errors.append("Storage namespaces must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def storage_path(self) -> Path:
        return self.storage_root.expanduser()

    @property
    def media_path(self) -> Path:
        return self.media_dir.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding apps).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
