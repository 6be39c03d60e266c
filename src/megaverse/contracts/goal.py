"""Goal map contract."""

from __future__ import annotations

from pydantic import BaseModel, Field

from megaverse.contracts.astral import AstralObject
from megaverse.contracts.exceptions import OutOfBoundsError


class GoalMap(BaseModel):
    """Immutable snapshot of the desired canvas, loaded once per run."""

    rows: int = Field(gt=0)
    cols: int = Field(gt=0)
    objects: frozenset[AstralObject] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def contains(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.cols

    def check_bounds(self, row: int, column: int) -> None:
        if not self.contains(row, column):
            raise OutOfBoundsError(row, column, rows=self.rows, cols=self.cols)
