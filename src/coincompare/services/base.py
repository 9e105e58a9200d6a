"""Shared plumbing for upstream JSON APIs.

This module provides:
- CircuitBreaker, which stops calling an upstream that keeps failing
- BaseAPIClient, a thin wrapper over a lazily created httpx.AsyncClient
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
import structlog

from coincompare.core.exceptions import CircuitBreakerOpenError, ExternalServiceError

log = structlog.get_logger(__name__)

MAX_BACKOFF_SECONDS = 4


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"  # one probe request allowed


@dataclass
class CircuitBreaker:
    """Blocks calls after ``failure_threshold`` failures in a row.

    After ``cooldown_seconds`` one probe is let through: success closes
    the circuit, failure opens it again for another cooldown.
    """

    failure_threshold: int = 5
    cooldown_seconds: float = 30
    clock: Callable[[], float] = time.monotonic
    failure_count: int = field(default=0, init=False)
    opened_at: float | None = field(default=None, init=False)
    state: CircuitState = field(default=CircuitState.CLOSED, init=False)

    def record_success(self) -> None:
        self.failure_count = 0
        self.opened_at = None
        self.state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self.failure_count += 1
        probe_failed = self.state == CircuitState.HALF_OPEN
        if probe_failed or self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                log.warning(
                    "circuit_breaker_opened",
                    failure_count=self.failure_count,
                    threshold=self.failure_threshold,
                )
            self.state = CircuitState.OPEN
            self.opened_at = self.clock()

    def seconds_until_probe(self) -> float:
        if self.opened_at is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (self.clock() - self.opened_at))

    def can_execute(self) -> bool:
        if self.state != CircuitState.OPEN:
            return True

        if self.seconds_until_probe() > 0:
            return False

        self.state = CircuitState.HALF_OPEN
        log.info("circuit_breaker_half_open", failure_count=self.failure_count)
        return True

    def raise_if_open(self, service: str) -> None:
        """Raise CircuitBreakerOpenError while requests to ``service`` are blocked."""
        if not self.can_execute():
            raise CircuitBreakerOpenError(
                f"{service} circuit open, next probe in {self.seconds_until_probe():.1f}s"
            )


def is_retryable(error: Exception) -> bool:
    """Rate limits, server errors and transport failures are worth another try."""
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        return status_code == 429 or status_code >= 500
    return isinstance(error, httpx.RequestError)


class BaseAPIClient:
    """Base for clients of a single upstream JSON API.

    Subclasses pass their service name, base URL and auth headers, then
    call ``get_json``. Every failure surfaces as ExternalServiceError.

    Attributes:
        service: Short name used in logs and errors.
        base_url: Prefix for every request path.
        timeout: Request timeout in seconds.
        headers: Headers sent with every request.
        max_retries: Attempts per request; 1 means no retry.

    Example:
        client = BaseAPIClient(service="example", base_url="https://api.example.com")
        try:
            payload = await client.get_json("/v1/things", params={"id": 1})
        finally:
            await client.close()
    """

    def __init__(
        self,
        service: str,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        max_retries: int = 3,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_cooldown: float = 30,
    ) -> None:
        self.service = service
        self.base_url = base_url
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.max_retries = max(1, max_retries)
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=circuit_breaker_threshold,
            cooldown_seconds=circuit_breaker_cooldown,
        )
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
            )
            log.debug("httpx_client_created", service=self.service, base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Release the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request, retrying retryable failures with exponential backoff.

        Raises:
            CircuitBreakerOpenError: If the upstream is currently blocked.
            ExternalServiceError: On a non-retryable status or once attempts run out.
        """
        self.circuit_breaker.raise_if_open(self.service)
        client = await self._get_client()

        attempt = 0
        while True:
            attempt += 1
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                status_code = (
                    e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                )
                retryable = is_retryable(e)
                if retryable:
                    self.circuit_breaker.record_failure()
                else:
                    # upstream answered, so a half-open circuit can close
                    self.circuit_breaker.record_success()

                log.warning(
                    "upstream_request_failed",
                    service=self.service,
                    method=method,
                    path=path,
                    status_code=status_code,
                    error=str(e) if status_code is None else None,
                    attempt=attempt,
                    max_retries=self.max_retries,
                )

                if not retryable or attempt >= self.max_retries:
                    raise ExternalServiceError(
                        service=self.service,
                        message=f"{method} {path} failed after {attempt} attempt(s): {e}",
                        status_code=status_code,
                    ) from e

                await asyncio.sleep(min(2 ** (attempt - 1), MAX_BACKOFF_SECONDS))
                continue

            self.circuit_breaker.record_success()
            return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", path, **kwargs)

    async def get_json(self, path: str, **kwargs: Any) -> dict[str, Any]:
        """GET ``path`` and return the decoded JSON object.

        Raises:
            ExternalServiceError: If the request fails or the body is not a JSON object.
        """
        response = await self.get(path, **kwargs)
        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                service=self.service,
                message=f"GET {path} returned malformed JSON",
                status_code=response.status_code,
            ) from e

        if not isinstance(payload, dict):
            raise ExternalServiceError(
                service=self.service,
                message=f"GET {path} returned {type(payload).__name__}, expected object",
                status_code=response.status_code,
            )
        return payload
