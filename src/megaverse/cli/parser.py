"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from megaverse.contracts.astral import ComethDirection, SoloonColor


def _package_version() -> str:
    try:
        return version("megaverse")
    except PackageNotFoundError:
        return "0.0.0"


def _add_position(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("row", type=int, help="Row index (0-based)")
    parser.add_argument("column", type=int, help="Column index (0-based)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="megaverse")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    parser.add_argument("--config", default="./megaverse.json", help="Path to megaverse.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="Create an astral object")
    create_subparsers = create_parser.add_subparsers(dest="kind", required=True)

    polyanet_parser = create_subparsers.add_parser("polyanet", help="Create a Polyanet")
    _add_position(polyanet_parser)

    cometh_parser = create_subparsers.add_parser("cometh", help="Create a Cometh")
    _add_position(cometh_parser)
    cometh_parser.add_argument(
        "direction",
        type=str.lower,
        choices=[direction.value for direction in ComethDirection],
        help="Direction the Cometh faces",
    )

    soloon_parser = create_subparsers.add_parser("soloon", help="Create a Soloon")
    _add_position(soloon_parser)
    soloon_parser.add_argument(
        "color",
        type=str.lower,
        choices=[color.value for color in SoloonColor],
        help="Color of the Soloon",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete the astral object at a position")
    _add_position(delete_parser)

    subparsers.add_parser("clear", help="Delete every astral object on the map")
    subparsers.add_parser("replicate", help="Clear the map, then create every object of the goal map")

    xshape_parser = subparsers.add_parser("xshape", help="Draw an X of polyanets on a square map")
    xshape_parser.add_argument("start", type=int, nargs="?", default=0, help="Cells to skip at each end")

    return parser


__all__ = ["build_parser"]
