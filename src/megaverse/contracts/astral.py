"""Astral object contracts.

Each astral object is an immutable value placed at a grid position. The three
variants differ only in their remote resource path and in the extra attribute
they send to the API.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from megaverse.contracts.exceptions import UnknownTypeError


class Method(StrEnum):
    """Mutation verbs accepted by the object endpoints."""

    CREATE = "POST"
    DELETE = "DELETE"


class ComethDirection(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_api(cls, token: str) -> ComethDirection:
        """Match *token* case-insensitively against the API values."""
        try:
            return cls(token.lower())
        except ValueError:
            raise UnknownTypeError(f"Invalid Cometh direction: {token}") from None


class SoloonColor(StrEnum):
    WHITE = "white"
    BLUE = "blue"
    RED = "red"
    PURPLE = "purple"

    @classmethod
    def from_api(cls, token: str) -> SoloonColor:
        """Match *token* case-insensitively against the API values."""
        try:
            return cls(token.lower())
        except ValueError:
            raise UnknownTypeError(f"Invalid Soloon color: {token}") from None


class AstralObjectBase(BaseModel):
    """Shared position and serialization for every astral object."""

    resource_path: ClassVar[str]

    row: int = Field(ge=0)
    column: int = Field(ge=0)

    model_config = {"frozen": True}

    def to_request_body(self, candidate_id: str) -> dict[str, Any]:
        body: dict[str, Any] = {"row": self.row, "column": self.column, "candidateId": candidate_id}
        body.update(self._extra_attributes())
        return body

    def _extra_attributes(self) -> dict[str, Any]:
        return {}

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.row}, {self.column})"


class Polyanet(AstralObjectBase):
    resource_path: ClassVar[str] = "/polyanets"


class Cometh(AstralObjectBase):
    resource_path: ClassVar[str] = "/comeths"

    direction: ComethDirection

    def _extra_attributes(self) -> dict[str, Any]:
        return {"direction": self.direction.value}

    def __str__(self) -> str:
        return f"Cometh({self.row}, {self.column}, {self.direction.value})"


class Soloon(AstralObjectBase):
    resource_path: ClassVar[str] = "/soloons"

    color: SoloonColor

    def _extra_attributes(self) -> dict[str, Any]:
        return {"color": self.color.value}

    def __str__(self) -> str:
        return f"Soloon({self.row}, {self.column}, {self.color.value})"


AstralObject = Polyanet | Cometh | Soloon


def delete_target(row: int, column: int) -> Polyanet:
    """Position-only object used to address a DELETE.

    The remote delete endpoints are keyed by position, so any variant works.
    """
    return Polyanet(row=row, column=column)
