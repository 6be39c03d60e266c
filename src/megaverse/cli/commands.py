"""Command execution and summary formatting."""

from __future__ import annotations

import argparse
from contextlib import AbstractContextManager, nullcontext

from rich.console import Console

from megaverse.cli.progress import RichReconcileProgress
from megaverse.contracts.astral import ComethDirection, SoloonColor
from megaverse.contracts.config import MegaverseConfig
from megaverse.contracts.results import ReconcileResult
from megaverse.engine.progress import ReconcileProgress
from megaverse.sdk import Megaverse

_BATCH_COMMANDS = frozenset({"clear", "replicate", "xshape"})


def format_reconcile_summary(command: str, result: ReconcileResult) -> str:
    status = "complete" if result.ok else "completed with failures"
    lines = [
        "",
        f"megaverse - {command} {status}",
        "",
        f"  Deleted:   {result.deleted} object{'s' if result.deleted != 1 else ''}",
    ]
    if command == "replicate":
        lines.append(f"  Created:   {result.created} object{'s' if result.created != 1 else ''}")
    if result.scan_error is not None:
        lines.append(f"  Scan:      failed ({result.scan_error})")
    if result.failures:
        lines.append(f"  Failed:    {len(result.failures)}")
        for failure in sorted(result.failures, key=lambda f: (f.row, f.column)):
            lines.append(f"    ({failure.row}, {failure.column})  {failure.error}")
    lines.append("")
    return "\n".join(lines)


async def run_command(args: argparse.Namespace, config: MegaverseConfig, console: Console) -> bool:
    """Execute the parsed command; returns ``False`` when it was skipped or partially failed."""
    display: AbstractContextManager[ReconcileProgress | None]
    if args.command in _BATCH_COMMANDS and not args.verbose:
        display = RichReconcileProgress(console)
    else:
        display = nullcontext()

    with display as progress:
        async with Megaverse(config, progress=progress) as megaverse:
            return await _dispatch(args, megaverse)


async def _dispatch(args: argparse.Namespace, megaverse: Megaverse) -> bool:
    if args.command == "create":
        if args.kind == "polyanet":
            return await megaverse.create_polyanet(args.row, args.column)
        if args.kind == "cometh":
            return await megaverse.create_cometh(args.row, args.column, ComethDirection.from_api(args.direction))
        return await megaverse.create_soloon(args.row, args.column, SoloonColor.from_api(args.color))
    if args.command == "delete":
        return await megaverse.delete(args.row, args.column)
    if args.command == "xshape":
        created = await megaverse.draw_x_shape(args.start)
        print(f"\nmegaverse - xshape complete\n\n  Created:   {created} polyanet{'s' if created != 1 else ''}\n")
        return True

    if args.command == "clear":
        result = await megaverse.clear()
    else:
        result = await megaverse.replicate()
    print(format_reconcile_summary(args.command, result))
    return result.ok


__all__ = ["format_reconcile_summary", "run_command"]
