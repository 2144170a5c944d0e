# src/cache/models.py — v2
"""Cache domain model: one resolution result per URL fingerprint."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

# Value written to the durable store for a failed resolution.
FAILED_SENTINEL = "Fail"


class CacheEntry(BaseModel):
    """Resolved preview image for a fingerprint, or a sticky failure marker."""

    model_config = ConfigDict(frozen=True)

    status: Literal["image", "failed"]
    image_url: str | None = None

    @model_validator(mode="after")
    def _check_image_url(self) -> CacheEntry:
        if self.status == "image" and not self.image_url:
            raise ValueError("image entries need a non-empty image_url")
        if self.status == "failed" and self.image_url is not None:
            raise ValueError("failed entries carry no image_url")
        return self

    @classmethod
    def image(cls, image_url: str) -> CacheEntry:
        return cls(status="image", image_url=image_url)

    @classmethod
    def failure(cls) -> CacheEntry:
        return cls(status="failed")

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def to_store_value(self) -> str:
        """Encode for the durable store: the image URL or the failure sentinel."""
        return FAILED_SENTINEL if self.failed else self.image_url  # type: ignore[return-value]

    @classmethod
    def from_store_value(cls, value: str) -> CacheEntry:
        if not value or value == FAILED_SENTINEL:
            return cls.failure()
        return cls.image(value)
