"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import asyncio
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from megaverse.cli.commands import run_command
from megaverse.cli.parser import build_parser
from megaverse.contracts.exceptions import (
    ConfigError,
    GridError,
    InvalidGeometryError,
    OutOfBoundsError,
    RemoteError,
    UnknownTypeError,
)
from megaverse.sdk import load_config


def _configure_logging(console: Console, *, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(name)s %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console(stderr=True)
    _configure_logging(console, verbose=args.verbose)

    try:
        config = load_config(args.config)
        ok = asyncio.run(run_command(args, config, console))
        return 0 if ok else 5
    except (ConfigError, GridError, UnknownTypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except RemoteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except (OutOfBoundsError, InvalidGeometryError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
