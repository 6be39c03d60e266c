"""Reconciliation result contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Failure(BaseModel):
    """One position that could not be reconciled."""

    row: int
    column: int
    error: str


class ReconcileResult(BaseModel):
    deleted: int = 0
    created: int = 0
    failures: list[Failure] = Field(default_factory=list)
    scan_error: str | None = None
    """Set when the current canvas could not be read, so nothing was cleared."""

    @property
    def ok(self) -> bool:
        return self.scan_error is None and not self.failures
