# src/logging/context.py — v2
"""Contextual logging support: attach request_id, link and kind to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set per preview request. asyncio tasks copy the context at creation, so a
# fetch task keeps the values of the request that dispatched it.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_link: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "link", default=None
)
_kind: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "kind", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    link: str | None = None
    kind: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        link=_link.get(),
        kind=_kind.get(),
    )


def set_request_context(request_id: str, link: str | None = None, kind: str | None = None) -> None:
    """Set request-level context (called once per preview request)."""
    _request_id.set(request_id)
    _link.set(link)
    _kind.set(kind)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _link.set(None)
    _kind.set(None)
