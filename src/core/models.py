# src/core/models.py — v2
"""Domain models shared across classifier, cache, fetch and preview layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from linkpreview.core.errors import ResolutionError

if TYPE_CHECKING:
    from linkpreview.preview.interfaces import LinkListener


class ResolutionKind(str, Enum):
    """How a preview image is derived and what a click opens."""

    NONE = "none"
    YOUTUBE_THUMBNAIL = "youtube_thumbnail"
    GENERIC_ARTICLE = "generic_article"


class PreviewState(str, Enum):
    """Lifecycle of a single preview request."""

    IDLE = "idle"
    CLASSIFYING = "classifying"
    HIDDEN = "hidden"
    FETCHING = "fetching"
    RENDERING = "rendering"


class Classification(BaseModel):
    """Canonical URL found in some input, with its resolution kind."""

    model_config = ConfigDict(frozen=True)

    url: str
    kind: ResolutionKind
    video_id: str | None = None


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of resolving a generic article URL.

    Exactly one of ``image_url`` / ``error`` is set.
    """

    image_url: str | None = None
    error: ResolutionError | None = None

    @property
    def failed(self) -> bool:
        return self.image_url is None


@dataclass
class PreviewRequest:
    """Transient state for one parse_text_for_link / set_link call."""

    request_id: str
    generation: int
    text: str
    url: str = ""
    kind: ResolutionKind = ResolutionKind.NONE
    fingerprint: str | None = None
    listener: LinkListener | None = None
