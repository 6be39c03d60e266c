"""Async HTTP client for the megaverse API."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any

import httpx

from megaverse.client._retry import RetryPolicy
from megaverse.contracts.astral import AstralObject, Method
from megaverse.contracts.config import DEFAULT_BASE_URL, MegaverseConfig
from megaverse.contracts.exceptions import (
    MalformedResponseError,
    MegaverseError,
    RemoteError,
    TerminalRemoteError,
    TransientRemoteError,
)

logger = logging.getLogger(__name__)

# Status codes treated as a successful mutation. Anything else in 2xx is unexpected.
_SUCCESS_STATUS_CODES = range(200, 227)
_RATE_LIMIT_STATUS = 429


def classify_response(response: httpx.Response) -> RemoteError | None:
    """Map a response to ``None`` (success), a retryable or a terminal error."""
    status = response.status_code
    if status in _SUCCESS_STATUS_CODES:
        return None

    body = response.text
    if status == _RATE_LIMIT_STATUS:
        logger.warning("Too Many Requests (retryable): status=%d body=%s", status, body)
        return TransientRemoteError(f"Rate limited: HTTP {status}", status_code=status)
    if 500 <= status < 600:
        logger.warning("Server error (retryable): status=%d body=%s", status, body)
        return TransientRemoteError(f"Server error: HTTP {status}", status_code=status)
    if 400 <= status < 500:
        logger.error("Client error (won't retry): status=%d body=%s", status, body)
        return TerminalRemoteError(f"Client error: HTTP {status}", status_code=status)

    logger.error("Unexpected response: status=%d body=%s", status, body)
    return TerminalRemoteError(f"Unexpected response: HTTP {status}", status_code=status)


class MegaverseClient:
    """Issues reads and paced, retried mutations against the megaverse API.

    Use as an async context manager so the underlying connection pool is
    opened and closed with the run::

        async with MegaverseClient.from_config(config) as client:
            await client.apply(Polyanet(row=1, column=2), Method.CREATE)

    An already-configured ``httpx.AsyncClient`` may be injected; the caller
    then owns its lifecycle.
    """

    def __init__(
        self,
        *,
        candidate_id: str,
        base_url: str = DEFAULT_BASE_URL,
        retry_policy: RetryPolicy | None = None,
        request_delay_seconds: float = 1.0,
        timeout_seconds: float = 30.0,
        max_connections: int = 10,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._candidate_id = candidate_id
        self._base_url = base_url
        self._retry_policy = retry_policy or RetryPolicy()
        self._request_delay_seconds = request_delay_seconds
        self._timeout_seconds = timeout_seconds
        self._max_connections = max_connections
        self._http = http_client
        self._owns_http = http_client is None

    @classmethod
    def from_config(cls, config: MegaverseConfig, *, http_client: httpx.AsyncClient | None = None) -> MegaverseClient:
        return cls(
            candidate_id=config.candidate_id,
            base_url=config.base_url,
            retry_policy=RetryPolicy(
                max_attempts=config.max_retry_attempts,
                backoff_seconds=config.backoff_seconds,
                max_backoff_seconds=config.max_backoff_seconds,
                jitter_factor=config.jitter_factor,
            ),
            request_delay_seconds=config.request_delay_seconds,
            timeout_seconds=config.timeout_seconds,
            max_connections=max(10, config.parallel_degree),
            http_client=http_client,
        )

    @property
    def candidate_id(self) -> str:
        return self._candidate_id

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MegaverseClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                limits=httpx.Limits(max_connections=self._max_connections),
                timeout=httpx.Timeout(self._timeout_seconds),
            )
            self._owns_http = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None

    def _require_http(self) -> httpx.AsyncClient:
        if self._http is None:
            raise MegaverseError("Client is not initialized. Use 'async with'.")
        return self._http

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def apply(self, obj: AstralObject, method: Method) -> None:
        """Create or delete *obj*, retrying transient failures.

        Returns once the call has succeeded and the pacing delay has elapsed.

        Raises:
            TerminalRemoteError: On a non-retryable failure or once the retry
                budget is exhausted.
        """
        policy = self._retry_policy
        for attempt in range(policy.max_attempts + 1):
            try:
                await self._send(obj, method)
            except TransientRemoteError as exc:
                if attempt >= policy.max_attempts:
                    logger.error("Giving up on %s %s after %d attempts: %s", method.value, obj, attempt + 1, exc)
                    raise TerminalRemoteError(
                        f"{method.value} {obj} failed after {attempt + 1} attempts: {exc}",
                        status_code=exc.status_code,
                        attempts=attempt + 1,
                    ) from exc
                await policy.sleep_before_retry(attempt)
                continue

            logger.info("Successfully performed %s on %s", method.value, obj)
            if self._request_delay_seconds > 0:
                await asyncio.sleep(self._request_delay_seconds)
            return

    async def _send(self, obj: AstralObject, method: Method) -> None:
        http = self._require_http()
        logger.debug("%s %s %s", method.value, obj.resource_path, obj)
        try:
            response = await http.request(
                method.value,
                obj.resource_path,
                json=obj.to_request_body(self._candidate_id),
            )
        except httpx.RequestError as exc:
            logger.error("Request failure on %s %s (won't retry): %r", method.value, obj, exc)
            raise TerminalRemoteError(f"Transport failure on {method.value} {obj}: {exc!r}") from exc

        error = classify_response(response)
        if error is not None:
            raise error

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_json(self, path: str) -> Any:
        """GET *path* and decode its JSON body. Reads are not retried."""
        http = self._require_http()
        try:
            response = await http.get(path)
        except httpx.RequestError as exc:
            logger.error("Request failure on GET %s: %r", path, exc)
            raise TerminalRemoteError(f"Transport failure on GET {path}: {exc!r}") from exc

        status = response.status_code
        if status not in _SUCCESS_STATUS_CODES:
            # Reads are not retried: every error status is terminal here.
            logger.error("Read failed: GET %s status=%d body=%s", path, status, response.text)
            raise TerminalRemoteError(f"GET {path} failed: HTTP {status}", status_code=status)

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"GET {path} returned invalid JSON") from exc
