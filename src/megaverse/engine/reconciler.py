"""Bounded-concurrency reconciliation of the canvas against the goal map."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import TypeVar

from megaverse.client.client import MegaverseClient
from megaverse.contracts.astral import AstralObject, Method, delete_target
from megaverse.contracts.exceptions import MegaverseError
from megaverse.contracts.goal import GoalMap
from megaverse.contracts.results import Failure, ReconcileResult
from megaverse.engine.progress import NullReconcileProgress, ReconcileProgress
from megaverse.state import StateFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

PHASE_SCAN = "Scan"
PHASE_CLEAR = "Clear"
PHASE_CREATE = "Create"


class Reconciler:
    """Drives clear/replicate batches and single-object commands.

    The goal map is a snapshot taken once per run and never refreshed, so
    concurrent creates all read the same immutable data. At most
    *parallel_degree* remote calls are in flight at any time.

    Args:
        client: Remote client used for every mutation.
        fetcher: Source of the live canvas content.
        goal_map: Goal snapshot for this run.
        parallel_degree: Maximum concurrent remote calls.
        progress: Optional observer for batch progress.
    """

    def __init__(
        self,
        client: MegaverseClient,
        fetcher: StateFetcher,
        goal_map: GoalMap,
        *,
        parallel_degree: int = 3,
        progress: ReconcileProgress | None = None,
    ) -> None:
        if parallel_degree < 1:
            raise ValueError("parallel_degree must be >= 1")
        self._client = client
        self._fetcher = fetcher
        self._goal_map = goal_map
        self._parallel_degree = parallel_degree
        self._progress = progress or NullReconcileProgress()
        self._semaphore = asyncio.Semaphore(parallel_degree)

    @property
    def goal_map(self) -> GoalMap:
        return self._goal_map

    # ------------------------------------------------------------------
    # Single-object commands
    # ------------------------------------------------------------------

    async def create(self, obj: AstralObject) -> None:
        """Create *obj*; raises ``OutOfBoundsError`` before any remote call."""
        self._goal_map.check_bounds(obj.row, obj.column)
        await self._client.apply(obj, Method.CREATE)

    async def delete(self, row: int, column: int) -> None:
        """Delete whatever occupies ``(row, column)``."""
        self._goal_map.check_bounds(row, column)
        await self._client.apply(delete_target(row, column), Method.DELETE)

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def clear(self) -> ReconcileResult:
        """Delete every occupied cell on the canvas, best effort.

        Never raises for remote or parsing failures: they are logged and
        reported in the returned result.
        """
        result = ReconcileResult()
        self._progress.phase_start(PHASE_SCAN, total=1)
        try:
            content = await self._fetcher.fetch_current_content()
        except MegaverseError as exc:
            logger.error("Could not read current map content, nothing cleared: %s", exc)
            self._progress.item_failed(PHASE_SCAN, exc)
            self._progress.phase_done(PHASE_SCAN)
            result.scan_error = str(exc)
            return result
        self._progress.item_done(PHASE_SCAN)
        self._progress.phase_done(PHASE_SCAN)

        targets = [
            delete_target(row, column)
            for row, cells in enumerate(content)
            for column, occupied in enumerate(cells)
            if occupied
        ]
        logger.info("Deleting %d astral objects", len(targets))

        for target, error in await self._run_batch(PHASE_CLEAR, targets, Method.DELETE):
            if error is None:
                result.deleted += 1
                continue
            logger.error("Failed to delete object at (%d, %d): %s", target.row, target.column, error)
            result.failures.append(Failure(row=target.row, column=target.column, error=str(error)))

        if result.failures:
            logger.error("Clear finished with %d of %d deletions failed", len(result.failures), len(targets))
        else:
            logger.info("Clear finished: %d objects deleted", result.deleted)
        return result

    async def replicate(self) -> ReconcileResult:
        """Clear the canvas, then create every object of the goal map.

        Raises:
            TerminalRemoteError: The first create failure, once every
                dispatched create has finished.
        """
        result = await self.clear()
        result.created = await self.create_many(self._goal_map.objects)
        logger.info("Replicate finished: %d deleted, %d created", result.deleted, result.created)
        return result

    async def create_many(self, objects: Iterable[AstralObject]) -> int:
        """Create *objects* concurrently and return how many were created.

        Every object is bounds-checked before the first remote call. Sibling
        creates are not cancelled when one fails; the first failure is
        raised after the whole batch has drained.
        """
        batch = sorted(objects, key=lambda obj: (obj.row, obj.column))
        for obj in batch:
            self._goal_map.check_bounds(obj.row, obj.column)
        logger.info("Creating %d astral objects", len(batch))

        created = 0
        errors: list[Exception] = []
        for obj, error in await self._run_batch(PHASE_CREATE, batch, Method.CREATE):
            if error is None:
                created += 1
                continue
            logger.error("Failed to create %s: %s", obj, error)
            errors.append(error)

        if errors:
            logger.error("%d of %d creations failed", len(errors), len(batch))
            raise errors[0]
        return created

    async def _run_batch(
        self,
        phase: str,
        objects: Iterable[AstralObject],
        method: Method,
    ) -> list[tuple[AstralObject, Exception | None]]:
        batch = list(objects)
        self._progress.phase_start(phase, total=len(batch))

        async def run_one(obj: AstralObject) -> None:
            try:
                await self._guarded(self._client.apply(obj, method))
            except Exception as exc:
                self._progress.item_failed(phase, exc)
                raise
            self._progress.item_done(phase)

        outcomes = await asyncio.gather(*(run_one(obj) for obj in batch), return_exceptions=True)
        self._progress.phase_done(phase)

        paired: list[tuple[AstralObject, Exception | None]] = []
        for obj, outcome in zip(batch, outcomes, strict=True):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            paired.append((obj, outcome if isinstance(outcome, Exception) else None))
        return paired

    async def _guarded(self, op: Awaitable[T]) -> T:
        async with self._semaphore:
            return await op
