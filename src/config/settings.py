# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for fetch, cache and logging settings.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_SIZE = re.compile(r"^\d+\s*(KB|MB|GB)$", re.IGNORECASE)


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Fetch ===
    user_agent: str = "Mozilla"
    youtube_thumbnail_template: str = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"

    # === Click-through ===
    accent_color: str = "#00FFFF"

    # === Cache ===
    cache_backend: Literal["json", "sqlite", "redis", "memory"] = "json"
    cache_root: Path = Path("~/.linkpreview/cache")
    cache_redis_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("accent_color")
    @classmethod
    def validate_accent_color(cls, v: str) -> str:  # noqa: N805
        if not _HEX_COLOR.match(v):
            raise ValueError("accent_color must look like #RRGGBB")
        return v.upper()

    @field_validator("youtube_thumbnail_template")
    @classmethod
    def validate_thumbnail_template(cls, v: str) -> str:  # noqa: N805
        if "{video_id}" not in v:
            raise ValueError("youtube_thumbnail_template must contain {video_id}")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        if not _SIZE.match(self.log_rotation.strip()):
            errors.append(f"LOG_ROTATION must look like '10MB', got {self.log_rotation!r}")

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
