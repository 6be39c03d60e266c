"""Rich display of reconcile progress, one bar per phase."""

from __future__ import annotations

from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from megaverse.engine.progress import PhaseTally, ReconcileProgress


class RichReconcileProgress(ReconcileProgress):
    """Live bars for Scan, Clear and Create.

    Failed calls advance the bar like successful ones, and the phase label
    carries a red failure count, so a Clear that absorbed failures still
    ends full and shows how many positions were left behind::

        with RichReconcileProgress(console) as progress:
            async with Megaverse(config, progress=progress) as megaverse:
                await megaverse.replicate()
    """

    _PHASE_STYLES: ClassVar[dict[str, str]] = {
        "Scan": "cyan",
        "Clear": "magenta",
        "Create": "green",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>24}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console or Console(stderr=True),
        )
        self._phases: dict[str, tuple[RichTaskID, PhaseTally]] = {}

    def __enter__(self) -> RichReconcileProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def tally(self, phase: str) -> PhaseTally | None:
        entry = self._phases.get(phase)
        return entry[1] if entry else None

    def phase_start(self, phase: str, total: int | None = None) -> None:
        tally = PhaseTally(total=total)
        task_id = self._progress.add_task(self._describe(phase, tally), total=total)
        self._phases[phase] = (task_id, tally)

    def item_done(self, phase: str) -> None:
        self._settle(phase, failed=False)

    def item_failed(self, phase: str, error: BaseException) -> None:
        self._settle(phase, failed=True)

    def phase_done(self, phase: str) -> None:
        entry = self._phases.get(phase)
        if entry is None:
            return
        task_id, tally = entry
        total = tally.total if tally.total is not None else max(tally.settled, 1)
        self._progress.update(task_id, total=total, completed=total, description=self._describe(phase, tally))

    def _settle(self, phase: str, *, failed: bool) -> None:
        entry = self._phases.get(phase)
        if entry is None:
            return
        task_id, tally = entry
        tally.record(failed=failed)
        self._progress.update(task_id, advance=1, description=self._describe(phase, tally))

    def _describe(self, phase: str, tally: PhaseTally) -> str:
        label = f"[{self._PHASE_STYLES.get(phase, 'white')}]{phase}[/]"
        if tally.failed:
            return f"[red]✗[/red] {label} [red]({tally.failed} failed)[/red]"
        return label
