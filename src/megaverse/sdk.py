"""SDK composition root for megaverse."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from megaverse.client.client import MegaverseClient
from megaverse.contracts.astral import (
    AstralObject,
    Cometh,
    ComethDirection,
    Polyanet,
    Soloon,
    SoloonColor,
)
from megaverse.contracts.config import MegaverseConfig
from megaverse.contracts.exceptions import ConfigError, InvalidGeometryError, MegaverseError, OutOfBoundsError
from megaverse.contracts.goal import GoalMap
from megaverse.contracts.results import ReconcileResult
from megaverse.engine.progress import ReconcileProgress
from megaverse.engine.reconciler import Reconciler
from megaverse.state import StateFetcher

logger = logging.getLogger(__name__)

CANDIDATE_ID_ENV = "MEGAVERSE_CANDIDATE_ID"


def load_config(path: str | Path) -> MegaverseConfig:
    """Load and validate config from JSON.

    ``candidate_id`` may be left out of the file when ``MEGAVERSE_CANDIDATE_ID``
    is set; a value in the file wins over the environment.
    """
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc

    if not isinstance(raw_payload, dict):
        raise ConfigError(f"config file must contain a JSON object: {config_path}")

    env_candidate = (os.getenv(CANDIDATE_ID_ENV) or "").strip()
    if env_candidate and not raw_payload.get("candidate_id"):
        raw_payload = {**raw_payload, "candidate_id": env_candidate}

    try:
        return MegaverseConfig.model_validate(raw_payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc


class Megaverse:
    """Megaverse SDK public API.

    Opening the SDK fetches the goal map once; every command then runs
    against that snapshot::

        async with Megaverse(config) as megaverse:
            await megaverse.replicate()
    """

    def __init__(
        self,
        config: MegaverseConfig,
        *,
        progress: ReconcileProgress | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._progress = progress
        self._client = MegaverseClient.from_config(config, http_client=http_client)
        self._reconciler: Reconciler | None = None

    async def __aenter__(self) -> Megaverse:
        await self._client.__aenter__()
        try:
            fetcher = StateFetcher(self._client, goal_path=self._config.goal_path, map_path=self._config.map_path)
            goal_map = await fetcher.fetch_goal()
        except BaseException:
            await self._client.__aexit__(None, None, None)
            raise
        self._reconciler = Reconciler(
            self._client,
            fetcher,
            goal_map,
            parallel_degree=self._config.parallel_degree,
            progress=self._progress,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._reconciler = None
        await self._client.__aexit__(exc_type, exc_val, exc_tb)

    def _require_reconciler(self) -> Reconciler:
        if self._reconciler is None:
            raise MegaverseError("Megaverse is not initialized. Use 'async with'.")
        return self._reconciler

    @property
    def goal_map(self) -> GoalMap:
        return self._require_reconciler().goal_map

    # ------------------------------------------------------------------
    # Single-object commands
    # ------------------------------------------------------------------

    async def create_polyanet(self, row: int, column: int) -> bool:
        logger.info("Creating Polyanet at (%d, %d)...", row, column)
        return await self._create_checked(row, column, lambda: Polyanet(row=row, column=column))

    async def create_cometh(self, row: int, column: int, direction: ComethDirection) -> bool:
        logger.info("Creating Cometh facing %s at (%d, %d)...", direction.value, row, column)
        return await self._create_checked(
            row, column, lambda: Cometh(row=row, column=column, direction=direction)
        )

    async def create_soloon(self, row: int, column: int, color: SoloonColor) -> bool:
        logger.info("Creating %s Soloon at (%d, %d)...", color.value, row, column)
        return await self._create_checked(row, column, lambda: Soloon(row=row, column=column, color=color))

    async def delete(self, row: int, column: int) -> bool:
        """Delete the object at ``(row, column)``; returns ``False`` when out of bounds."""
        logger.info("Deleting astral object at (%d, %d)...", row, column)
        try:
            await self._require_reconciler().delete(row, column)
        except OutOfBoundsError as exc:
            logger.error("%s", exc)
            return False
        return True

    async def _create_checked(self, row: int, column: int, build: Callable[[], AstralObject]) -> bool:
        # Bounds come first: negative coordinates cannot even be modelled.
        reconciler = self._require_reconciler()
        goal_map = reconciler.goal_map
        if not goal_map.contains(row, column):
            logger.error("%s", OutOfBoundsError(row, column, rows=goal_map.rows, cols=goal_map.cols))
            return False
        await reconciler.create(build())
        return True

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def clear(self) -> ReconcileResult:
        logger.info("Deleting all astral objects...")
        return await self._require_reconciler().clear()

    async def replicate(self) -> ReconcileResult:
        logger.info("Replicating goal map...")
        return await self._require_reconciler().replicate()

    async def draw_x_shape(self, start: int = 0) -> int:
        """Draw both diagonals of a square map with polyanets, skipping *start* cells at each end.

        Returns:
            The number of polyanets created.

        Raises:
            InvalidGeometryError: If the map is not square or *start* is negative.
        """
        reconciler = self._require_reconciler()
        goal_map = reconciler.goal_map
        if not goal_map.is_square:
            raise InvalidGeometryError(
                f"The goal map must be square (rows == cols), but found {goal_map.rows}x{goal_map.cols}"
            )
        if start < 0:
            raise InvalidGeometryError(f"X-shape start must be non-negative, got {start}")

        size = goal_map.rows
        logger.info("Creating X shape of polyanets starting from %d", start)
        cells = {Polyanet(row=x, column=x) for x in range(start, size - start)}
        cells |= {Polyanet(row=x, column=size - x - 1) for x in range(start, size - start)}
        return await reconciler.create_many(cells)
