"""Exponential backoff with jitter for transient remote failures."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff schedule applied to retryable failures.

    Attributes:
        max_attempts: Retries allowed after the first attempt.
        backoff_seconds: Delay before the first retry; doubles per retry.
        max_backoff_seconds: Upper bound for the un-jittered delay.
        jitter_factor: Fraction of the delay by which each wait is randomly
            shifted up or down, in ``[0, 1]``.
    """

    max_attempts: int = 5
    backoff_seconds: float = 2.0
    max_backoff_seconds: float = 30.0
    jitter_factor: float = 0.5

    def delay_for(self, retry: int) -> float:
        """Seconds to wait before retry number *retry* (0-based)."""
        base = min(self.max_backoff_seconds, self.backoff_seconds * (2**retry))
        if self.jitter_factor == 0 or base == 0:
            return base
        offset = base * self.jitter_factor
        return max(0.0, base + random.uniform(-offset, offset))

    async def sleep_before_retry(self, retry: int) -> None:
        seconds = self.delay_for(retry)
        _LOG.warning("Retrying request (attempt %d of %d) in %.2fs", retry + 1, self.max_attempts, seconds)
        await asyncio.sleep(seconds)
