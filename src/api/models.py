# src/api/models.py — v2
"""API-level result model returned by facade.preview_text()."""

from __future__ import annotations

from pydantic import BaseModel

from linkpreview.core.models import PreviewState, ResolutionKind


class PreviewResult(BaseModel):
    """Final state of a one-shot preview."""

    found: bool
    url: str = ""
    kind: ResolutionKind = ResolutionKind.NONE
    state: PreviewState = PreviewState.IDLE
    image_url: str | None = None
    visible: bool = False
    error: str | None = None
