"""Goal grid parsing into astral objects."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from megaverse.contracts.astral import AstralObject, Cometh, ComethDirection, Polyanet, Soloon, SoloonColor
from megaverse.contracts.exceptions import EmptyGridError, MalformedResponseError, UnknownTypeError

SPACE = "SPACE"
_POLYANET = "POLYANET"
_COMETH_SUFFIX = "_COMETH"
_SOLOON_SUFFIX = "_SOLOON"


def parse_astral_objects(grid: Sequence[Sequence[Any]]) -> frozenset[AstralObject]:
    """Turn a 2-D grid of type tags into the set of astral objects it describes.

    The first row's length is the column count for every row. Cells beyond it
    are ignored; a row shorter than it is rejected.

    Raises:
        EmptyGridError: If the grid has no rows or the first row is empty.
        MalformedResponseError: If a row is shorter than the first row.
        UnknownTypeError: If a tag is not a string from the known vocabulary.
    """
    if not grid or not grid[0]:
        raise EmptyGridError("Invalid goal response: Empty grid received")

    cols = len(grid[0])
    objects: set[AstralObject] = set()
    for row, cells in enumerate(grid):
        if len(cells) < cols:
            raise MalformedResponseError(f"Row {row} has {len(cells)} cells, expected {cols}")
        for column in range(cols):
            tag = cells[column]
            if tag == SPACE:
                continue
            objects.add(parse_tag(tag, row, column))
    return frozenset(objects)


def parse_tag(tag: Any, row: int, column: int) -> AstralObject:
    if not isinstance(tag, str):
        raise UnknownTypeError(f"Unknown astral object at ({row}, {column}): {tag!r}")
    if tag == _POLYANET:
        return Polyanet(row=row, column=column)
    if tag.endswith(_COMETH_SUFFIX):
        direction = ComethDirection.from_api(tag.removesuffix(_COMETH_SUFFIX))
        return Cometh(row=row, column=column, direction=direction)
    if tag.endswith(_SOLOON_SUFFIX):
        color = SoloonColor.from_api(tag.removesuffix(_SOLOON_SUFFIX))
        return Soloon(row=row, column=column, color=color)
    raise UnknownTypeError(f"Unknown astral object: {tag}")
