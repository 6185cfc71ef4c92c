"""
Command-line interface for the page generator.

This module provides the main CLI entry point with commands for:
- serve: Run the development/production HTTP server
- render: Print the page a hostname would receive
- resolve: Print the resolved configuration record as JSON
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from dotenv import load_dotenv

from . import __version__
from .config import Settings, load_settings
from .derived import parse_iso_datetime
from .event_logger import EventLogger
from .exceptions import SettingsError
from .handler import PageHandler, create_page_handler


def request_url(hostname: str, preset: Optional[int] = None) -> str:
    """Build the URL a browser would request for a hostname."""
    host = f"[{hostname}]" if ":" in hostname else hostname
    query = f"?{urlencode({'theme': preset})}" if preset is not None else ""
    return f"http://{host}/{query}"


def _load_runtime(args: argparse.Namespace) -> tuple[Settings, EventLogger]:
    """Load .env and settings; SettingsError propagates to the caller."""
    load_dotenv(args.env_file, override=False)
    settings = load_settings(os.environ)
    logger = EventLogger.from_settings(
        level="debug" if getattr(args, "verbose", False) else settings.logging.level,
        output_format=settings.logging.output_format,
    )
    return settings, logger


def _build_handler(args: argparse.Namespace) -> PageHandler:
    settings, logger = _load_runtime(args)
    return create_page_handler(settings, dict(os.environ), logger)


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP server under uvicorn."""
    import uvicorn

    from .server import create_app

    try:
        settings, logger = _load_runtime(args)
    except SettingsError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    app = create_app(settings, dict(os.environ), logger)
    uvicorn.run(
        app,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        log_level="debug" if args.verbose else "info",
    )
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Render the page for a hostname to stdout or a file."""
    at = parse_iso_datetime(args.at) if args.at else None
    if args.at and at is None:
        print(f"Error: invalid --at value: {args.at}", file=sys.stderr)
        return 2

    try:
        handler = _build_handler(args)
    except SettingsError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    page = asyncio.run(handler.handle(request_url(args.hostname, args.theme), now=at))

    if args.output:
        Path(args.output).write_text(page.body, encoding="utf-8")
        print(f"Wrote {args.output} (mode: {page.headers['x-page-mode']})")
    else:
        print(page.body)
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Print the resolved configuration for a hostname as JSON."""
    try:
        handler = _build_handler(args)
    except SettingsError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    resolved = asyncio.run(
        handler.resolver.resolve(args.hostname, handler.environment, preset_selector=args.theme)
    )
    output = {
        "source": resolved.source.value,
        "presets": [preset.name for preset in resolved.presets],
        "presetIndex": resolved.preset_index,
        "config": resolved.record.to_dict(),
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-parkour",
        description="Hostname-aware parking, coming-soon and landing pages",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to a .env file loaded before reading settings (default: .env)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'serve' command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve pages over HTTP",
    )
    serve_parser.add_argument(
        "--host",
        help="Bind address (default: PARKOUR_HOST or 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        help="Bind port (default: PARKOUR_PORT or 8787)",
    )
    serve_parser.set_defaults(func=cmd_serve)

    # 'render' command
    render_parser = subparsers.add_parser(
        "render",
        help="Render the page for a hostname",
    )
    render_parser.add_argument(
        "hostname",
        help="Hostname to render (e.g., example.com)",
    )
    render_parser.add_argument(
        "--theme", "-t",
        type=int,
        help="Local preset index (development hostnames only)",
    )
    render_parser.add_argument(
        "--output", "-o",
        help="Write the page to this file instead of stdout",
    )
    render_parser.add_argument(
        "--at",
        help="Render as of this ISO date/time (default: now)",
    )
    render_parser.set_defaults(func=cmd_render)

    # 'resolve' command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show the resolved configuration for a hostname",
    )
    resolve_parser.add_argument(
        "hostname",
        help="Hostname to resolve (e.g., example.com)",
    )
    resolve_parser.add_argument(
        "--theme", "-t",
        type=int,
        help="Local preset index (development hostnames only)",
    )
    resolve_parser.set_defaults(func=cmd_resolve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
