"""Shared test fixtures for megaverse tests."""

from __future__ import annotations

import pytest

from megaverse.client import MegaverseClient, RetryPolicy
from megaverse.contracts.config import MegaverseConfig
from tests.fakes.api import BASE_URL, CANDIDATE_ID, FakeMegaverseApi


@pytest.fixture
def api() -> FakeMegaverseApi:
    """A fake API serving the 3x3 cross goal with the same four cells occupied."""
    return FakeMegaverseApi()


@pytest.fixture
def config() -> MegaverseConfig:
    """Config with pacing, backoff and jitter disabled so tests run instantly."""
    return MegaverseConfig(
        candidate_id=CANDIDATE_ID,
        base_url=BASE_URL,
        parallel_degree=2,
        max_retry_attempts=3,
        backoff_seconds=0,
        jitter_factor=0,
        request_delay_seconds=0,
    )


@pytest.fixture
def client(api: FakeMegaverseApi, config: MegaverseConfig) -> MegaverseClient:
    """Client wired to the fake API; enter it with ``async with`` in the test."""
    return MegaverseClient(
        candidate_id=config.candidate_id,
        retry_policy=RetryPolicy(max_attempts=config.max_retry_attempts, backoff_seconds=0, jitter_factor=0),
        request_delay_seconds=0,
        http_client=api.http_client(),
    )
