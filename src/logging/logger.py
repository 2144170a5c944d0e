# src/logging/logger.py — v3
"""Logger factory with JSON and text formatters.

Both formatters stamp the record's own creation time and attach the preview
request context (request id, link, kind) from ``linkpreview.logging.context``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from linkpreview.logging.context import LogContext, get_context

if TYPE_CHECKING:
    from linkpreview.config.settings import Settings

ROOT_LOGGER = "linkpreview"


class _PreviewFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        trace = None
        if record.exc_info and record.exc_info[1] is not None:
            trace = self.formatException(record.exc_info)
        return self.render(record, created, get_context(), trace)

    def render(
        self,
        record: logging.LogRecord,
        created: datetime,
        ctx: LogContext,
        trace: str | None,
    ) -> str:
        raise NotImplementedError


class JsonFormatter(_PreviewFormatter):
    """One JSON object per record; ``context`` only when a request is active."""

    def render(self, record, created, ctx, trace) -> str:
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if ctx.as_dict():
            entry["context"] = ctx.as_dict()
        if trace:
            entry["exception"] = trace
        return json.dumps(entry, default=str)


class TextFormatter(_PreviewFormatter):
    """``<time> [LEVEL] logger [request] (kind) - message`` for terminals."""

    def render(self, record, created, ctx, trace) -> str:
        request = f" [{ctx.request_id}]" if ctx.request_id else ""
        kind = f" ({ctx.kind})" if ctx.kind else ""
        line = (
            f"{created:%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] "
            f"{record.name}{request}{kind} - {record.getMessage()}"
        )
        return f"{line}\n{trace}" if trace else line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the package root."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
) -> None:
    """Route ``linkpreview.*`` to stderr, plus ``log_file`` when set. Re-entrant."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from linkpreview.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    # httpx and httpcore report every request at INFO
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def setup_logging_from_settings(settings: Settings, verbose: bool = False) -> None:
    """Configure logging from Settings; ``verbose`` forces DEBUG."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
