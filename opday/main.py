"""Entry point for the opday service: `opday` console script."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

import uvicorn
from pydantic import ValidationError as SettingsError
from rich.console import Console
from rich.panel import Panel

from opday import __version__
from opday.api.server import create_app
from opday.config import Settings, get_settings
from opday.db.pool import open_pool
from opday.errors import OpdayError

console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opday", description="Health check record service")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-p", "--port", type=int, required=True, help="Bind port")
    parser.add_argument("--host", default=None, help="Bind address (default: API_HOST or 0.0.0.0)")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Verbose level (-v for debug logging)",
    )
    return parser


def _log_level(settings: Settings, verbose: int) -> int:
    if verbose >= 1:
        return logging.DEBUG
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def _fatal(message: str) -> NoReturn:
    console.print(Panel(message, title="opday: fatal", border_style="red"))
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Start the HTTP server."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except SettingsError as e:
        missing = ", ".join(
            str(err["loc"][0]).upper() for err in e.errors() if err.get("type") == "missing"
        )
        _fatal(f"Invalid configuration: {missing or e}\nSet DATABASE_DSN in the environment or .env")

    level = _log_level(settings, args.verbose)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    try:
        pool = open_pool(settings)
    except OpdayError as e:
        _fatal(e.detail)

    host = args.host or settings.api_host
    console.print(
        Panel.fit(
            f"[bold]opday {__version__}[/bold]\n"
            f"Bind:  {host}:{args.port}\n"
            f"Pool:  {settings.pool_size} (+{settings.pool_max_overflow} overflow)",
            title="opday",
            border_style="green",
        )
    )

    app = create_app(settings)
    app.state.pool = pool
    uvicorn.run(
        app,
        host=host,
        port=args.port,
        log_level=logging.getLevelName(level).lower(),
    )


if __name__ == "__main__":
    main()
