"""
Gateway HTTP Client.

Shared transport for the payment gateway adapters:
- Money-moving calls (session creation, create/execute payment): sent once
- Idempotent calls (token grant, validation): 5xx and connection errors
  retried with exponential backoff + jitter
- 4xx: fail immediately
- Any failure: IntegrationException (answered 502)
"""

import logging
from typing import Any

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.core.domain import IntegrationException

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({500, 502, 503, 504})


class GatewayRetryableError(Exception):
    """Transient gateway failure; triggers a retry on idempotent calls."""


class GatewayHttpClient:
    """
    Persistent AsyncClient wrapper for one payment gateway.

    Created once per process by the container and closed on shutdown.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, service: str, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.service = service
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            await self.initialize()
        return self._client  # type: ignore

    async def request(self, method: str, path: str, idempotent: bool = False, **kwargs: Any) -> dict[str, Any]:
        """
        Send a request and decode the JSON body.

        Args:
            idempotent: Safe to repeat; transient failures are retried.
                Leave False for anything that moves money.

        Raises:
            IntegrationException: Gateway unreachable or answering errors
        """
        send = self._execute_with_backoff if idempotent else self._execute_once
        try:
            return await send(method, path, **kwargs)
        except (GatewayRetryableError, httpx.HTTPError) as e:
            logger.error(f"{self.service} request {method} {path} failed: {e}")
            raise IntegrationException(self.service, f"{self.service} gateway error", e) from e

    @retry(
        retry=retry_if_exception_type(GatewayRetryableError),
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=1.0, max=10.0, jitter=2),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _execute_with_backoff(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        return await self._execute_once(method, path, **kwargs)

    async def _execute_once(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        client = await self._ensure_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise GatewayRetryableError(f"{self.service} unreachable: {e}") from e

        if response.status_code in RETRYABLE_STATUS_CODES:
            preview = response.text[:200] if response.text else "No body"
            logger.warning(f"{self.service} server error {response.status_code}: {preview}")
            raise GatewayRetryableError(f"{self.service} server error {response.status_code}")

        response.raise_for_status()
        return response.json() if response.text.strip() else {}
