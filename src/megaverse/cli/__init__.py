"""Command-line interface for megaverse."""

from __future__ import annotations

from megaverse.cli.app import main
from megaverse.cli.parser import build_parser

__all__ = ["build_parser", "main"]
