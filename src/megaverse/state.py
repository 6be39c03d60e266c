"""Goal and current-canvas fetchers."""

from __future__ import annotations

import logging
from typing import Any

from megaverse.client.client import MegaverseClient
from megaverse.contracts.exceptions import MalformedResponseError
from megaverse.contracts.goal import GoalMap
from megaverse.parser import parse_astral_objects

logger = logging.getLogger(__name__)


class StateFetcher:
    """Reads the goal grid and the live canvas content for one candidate."""

    def __init__(self, client: MegaverseClient, *, goal_path: str, map_path: str) -> None:
        self._client = client
        self._goal_path = goal_path
        self._map_path = map_path

    async def fetch_goal(self) -> GoalMap:
        """Fetch and parse the goal grid into an immutable :class:`GoalMap`.

        Raises:
            EmptyGridError: If the goal grid is empty.
            MalformedResponseError: If the response has no usable ``goal`` grid.
            UnknownTypeError: If the grid contains an unknown tag.
            TerminalRemoteError: If the request itself fails.
        """
        payload = await self._client.get_json(self._goal_path)
        grid = _require_grid(payload, "goal", source=self._goal_path)
        objects = parse_astral_objects(grid)
        goal_map = GoalMap(rows=len(grid), cols=len(grid[0]), objects=objects)
        logger.info(
            "Fetched goal with %d rows and %d cols (%d objects)", goal_map.rows, goal_map.cols, len(goal_map.objects)
        )
        return goal_map

    async def fetch_current_content(self) -> list[list[bool]]:
        """Return the live canvas as rows of occupied flags (cell is non-null)."""
        payload = await self._client.get_json(self._map_path)
        if not isinstance(payload, dict) or not isinstance(payload.get("map"), dict):
            raise MalformedResponseError(f"Response from {self._map_path} has no 'map' object")
        content = _require_grid(payload["map"], "content", source=self._map_path)
        return [[cell is not None for cell in row] for row in content]


def _require_grid(payload: Any, key: str, *, source: str) -> list[list[Any]]:
    if not isinstance(payload, dict) or payload.get(key) is None:
        raise MalformedResponseError(f"Response from {source} has no '{key}' field")
    grid = payload[key]
    if not isinstance(grid, list) or not all(isinstance(row, list) for row in grid):
        raise MalformedResponseError(f"'{key}' from {source} is not a 2-D list")
    return grid
