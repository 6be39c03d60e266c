"""Progress events emitted while reconciling the canvas.

A run moves through phases: ``Scan`` reads the live canvas, ``Clear``
deletes what is on it and ``Create`` places the goal objects. Every remote
call inside a phase settles with exactly one ``item_done`` or
``item_failed``, and ``phase_done`` follows once all of them have settled,
so a display always reaches the phase total even when failures were
absorbed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class PhaseTally:
    """Running count of settled calls in one phase."""

    total: int | None = None
    succeeded: int = 0
    failed: int = 0

    @property
    def settled(self) -> int:
        return self.succeeded + self.failed

    def record(self, *, failed: bool) -> None:
        if failed:
            self.failed += 1
        else:
            self.succeeded += 1


class ReconcileProgress(ABC):
    @abstractmethod
    def phase_start(self, phase: str, total: int | None = None) -> None:
        """*total* is the number of remote calls the phase will make, if known."""

    @abstractmethod
    def item_done(self, phase: str) -> None: ...

    @abstractmethod
    def item_failed(self, phase: str, error: BaseException) -> None:
        """A call in *phase* ended with a terminal error, whether or not the run absorbs it."""

    @abstractmethod
    def phase_done(self, phase: str) -> None:
        """Every call of *phase* has settled."""


class NullReconcileProgress(ReconcileProgress):
    def phase_start(self, phase: str, total: int | None = None) -> None:
        pass

    def item_done(self, phase: str) -> None:
        pass

    def item_failed(self, phase: str, error: BaseException) -> None:
        pass

    def phase_done(self, phase: str) -> None:
        pass
