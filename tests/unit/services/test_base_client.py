"""Unit tests for BaseAPIClient and CircuitBreaker."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx
from httpx import Response

from coincompare.core.exceptions import CircuitBreakerOpenError, ExternalServiceError
from coincompare.services.base import BaseAPIClient, CircuitBreaker, CircuitState

BASE_URL = "https://api.example.com"


@pytest.fixture
def no_sleep():
    """Skip retry backoff delays."""
    with patch("coincompare.services.base.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestCircuitBreaker:
    """Tests for CircuitBreaker state transitions."""

    def test_starts_closed(self):
        breaker = CircuitBreaker()
        assert breaker.state == CircuitState.CLOSED
        assert breaker.can_execute() is True

    def test_opens_at_threshold(self):
        breaker = CircuitBreaker(failure_threshold=2)

        breaker.record_failure()
        assert breaker.state == CircuitState.CLOSED
        breaker.record_failure()

        assert breaker.state == CircuitState.OPEN
        assert breaker.can_execute() is False

    def test_success_resets(self):
        breaker = CircuitBreaker(failure_threshold=2)
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()

        assert breaker.state == CircuitState.CLOSED

    def test_half_open_after_cooldown(self):
        now = [100.0]
        breaker = CircuitBreaker(failure_threshold=1, cooldown_seconds=30, clock=lambda: now[0])
        breaker.record_failure()

        now[0] += 29
        assert breaker.can_execute() is False
        assert breaker.seconds_until_probe() == pytest.approx(1.0)

        now[0] += 2
        assert breaker.can_execute() is True
        assert breaker.state == CircuitState.HALF_OPEN

    def test_failure_while_half_open_reopens(self):
        breaker = CircuitBreaker(failure_threshold=5, cooldown_seconds=30)
        breaker.state = CircuitState.HALF_OPEN

        breaker.record_failure()

        assert breaker.state == CircuitState.OPEN

    def test_raise_if_open(self):
        breaker = CircuitBreaker(failure_threshold=1)
        breaker.record_failure()

        with pytest.raises(CircuitBreakerOpenError, match="example"):
            breaker.raise_if_open("example")


class TestBaseAPIClient:
    """Tests for request error handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_json(self):
        respx.get(f"{BASE_URL}/ping").mock(return_value=Response(200, json={"ok": True}))
        client = BaseAPIClient(service="example", base_url=BASE_URL)

        assert await client.get_json("/ping") == {"ok": True}
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_not_retried(self, no_sleep):
        route = respx.get(f"{BASE_URL}/missing").mock(return_value=Response(404))
        client = BaseAPIClient(service="example", base_url=BASE_URL, max_retries=3)

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get("/missing")

        assert exc_info.value.status_code == 404
        assert route.call_count == 1
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_closes_half_open_circuit(self, no_sleep):
        respx.get(f"{BASE_URL}/missing").mock(return_value=Response(404))
        client = BaseAPIClient(service="example", base_url=BASE_URL, max_retries=3)
        client.circuit_breaker.state = CircuitState.HALF_OPEN
        client.circuit_breaker.failure_count = 4

        with pytest.raises(ExternalServiceError):
            await client.get("/missing")

        assert client.circuit_breaker.state == CircuitState.CLOSED
        assert client.circuit_breaker.failure_count == 0
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_retried_then_succeeds(self, no_sleep):
        route = respx.get(f"{BASE_URL}/flaky").mock(
            side_effect=[Response(503), Response(200, json={"ok": True})]
        )
        client = BaseAPIClient(service="example", base_url=BASE_URL, max_retries=3)

        assert await client.get_json("/flaky") == {"ok": True}
        assert route.call_count == 2
        no_sleep.assert_awaited_once()
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_single_attempt_client(self, no_sleep):
        route = respx.get(f"{BASE_URL}/down").mock(return_value=Response(500))
        client = BaseAPIClient(service="example", base_url=BASE_URL, max_retries=1)

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get("/down")

        assert exc_info.value.status_code == 500
        assert route.call_count == 1
        no_sleep.assert_not_awaited()
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error(self, no_sleep):
        respx.get(f"{BASE_URL}/timeout").mock(side_effect=httpx.ConnectTimeout("timed out"))
        client = BaseAPIClient(service="example", base_url=BASE_URL, max_retries=2)

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get("/timeout")

        assert exc_info.value.status_code is None
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_circuit_opens_and_blocks(self, no_sleep):
        route = respx.get(f"{BASE_URL}/down").mock(return_value=Response(500))
        client = BaseAPIClient(
            service="example",
            base_url=BASE_URL,
            max_retries=1,
            circuit_breaker_threshold=2,
        )

        for _ in range(2):
            with pytest.raises(ExternalServiceError):
                await client.get("/down")

        with pytest.raises(CircuitBreakerOpenError):
            await client.get("/down")

        assert route.call_count == 2
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_json(self):
        respx.get(f"{BASE_URL}/html").mock(return_value=Response(200, text="<html>"))
        client = BaseAPIClient(service="example", base_url=BASE_URL)

        with pytest.raises(ExternalServiceError, match="malformed JSON"):
            await client.get_json("/html")
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_object_json(self):
        respx.get(f"{BASE_URL}/list").mock(return_value=Response(200, json=[1, 2]))
        client = BaseAPIClient(service="example", base_url=BASE_URL)

        with pytest.raises(ExternalServiceError, match="expected object"):
            await client.get_json("/list")
        await client.close()
