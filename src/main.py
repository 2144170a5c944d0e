# src/main.py — v2
"""CLI entry point: preview and cache commands.

Usage:
    linkpreview preview "<text>" [--strict]
    linkpreview cache list
    linkpreview cache clear
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from linkpreview.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from linkpreview.config.settings import ConfigurationError, load_settings
    from linkpreview.logging.logger import setup_logging_from_settings

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    setup_logging_from_settings(settings, verbose=args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="linkpreview",
        description=f"linkpreview v{__version__} - resolve preview images for links",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- preview ---
    p_preview = subparsers.add_parser(
        "preview", help="Find a link in text and resolve its preview image",
    )
    p_preview.add_argument("text", help="Text containing a link")
    p_preview.add_argument(
        "--strict", action="store_true",
        help="Treat TEXT as a bare URL instead of searching it",
    )
    p_preview.set_defaults(func=_cmd_preview)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Inspect the resolution cache")
    cache_sub = p_cache.add_subparsers(dest="cache_command", required=True)
    cache_sub.add_parser("list", help="List cached resolutions").set_defaults(
        func=_cmd_cache_list,
    )
    cache_sub.add_parser("clear", help="Forget every cached resolution").set_defaults(
        func=_cmd_cache_clear,
    )

    return parser


async def _cmd_preview(args: argparse.Namespace, settings) -> int:
    """Resolve one preview and print it."""
    from linkpreview.api.facade import preview_text
    from linkpreview.core.errors import InvalidLinkError

    try:
        result = await preview_text(args.text, strict=args.strict, settings=settings)
    except InvalidLinkError as exc:
        logger.error("%s", exc)
        return 1

    if not result.found:
        print("No link found")
        return 1

    print(f"URL:    {result.url}")
    print(f"Kind:   {result.kind.value}")
    if result.image_url:
        print(f"Image:  {result.image_url}")
        return 0
    print("Image:  (none)")
    return 1


async def _cmd_cache_list(args: argparse.Namespace, settings) -> int:
    """Print every cached fingerprint and its value."""
    from linkpreview.api.facade import create_engine

    engine = await create_engine(settings, wait_for_cache=True)
    try:
        entries = engine.cache.entries()
        for fingerprint, entry in sorted(entries.items()):
            print(f"{fingerprint:>12}  {entry.to_store_value()}")
        print(f"\n{len(entries)} entries")
    finally:
        await engine.aclose()
    return 0


async def _cmd_cache_clear(args: argparse.Namespace, settings) -> int:
    """Drop every cached resolution, including sticky failures."""
    from linkpreview.api.facade import create_engine

    engine = await create_engine(settings, wait_for_cache=True)
    try:
        count = len(engine.cache)
        await engine.cache.clear()
        print(f"Cleared {count} entries")
    finally:
        await engine.aclose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
