"""Unit tests for the token catalog cache."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from coincompare.core.exceptions import ExternalServiceError
from coincompare.data.stores import MemoryStore
from coincompare.services.catalog.cache import TokenCatalogCache
from coincompare.services.catalog.models import CatalogSnapshot
from tests.factories.token import CatalogTokenFactory

TTL_MS = 4 * 60 * 60 * 1000


@pytest.fixture
def pages() -> tuple[list, list]:
    """Two listing pages."""
    first = [CatalogTokenFactory(id=1, symbol="BTC", name="Bitcoin")]
    second = [CatalogTokenFactory(id=5001, symbol="LATE", name="Late Token")]
    return first, second


@pytest.fixture
def cmc_client(mock_cmc_client: MagicMock, pages) -> MagicMock:
    first, second = pages

    async def fetch_listings(start: int, limit: int):
        return first if start == 1 else second

    mock_cmc_client.fetch_listings = AsyncMock(side_effect=fetch_listings)
    return mock_cmc_client


@pytest.fixture
def store() -> MemoryStore[CatalogSnapshot]:
    return MemoryStore()


@pytest.fixture
def cache(cmc_client, store, fake_clock) -> TokenCatalogCache:
    return TokenCatalogCache(client=cmc_client, store=store, ttl_ms=TTL_MS, clock=fake_clock)


class TestGetCatalog:
    """Tests for get_catalog."""

    @pytest.mark.asyncio
    async def test_miss_fetches_both_pages_in_order(self, cache, cmc_client):
        tokens = await cache.get_catalog()

        assert [t.id for t in tokens] == [1, 5001]
        assert cmc_client.fetch_listings.await_count == 2
        starts = sorted(call.kwargs["start"] for call in cmc_client.fetch_listings.await_args_list)
        assert starts == [1, 5001]
        for call in cmc_client.fetch_listings.await_args_list:
            assert call.kwargs["limit"] == 5000

    @pytest.mark.asyncio
    async def test_snapshot_written_with_ttl(self, cache, store, fake_clock):
        await cache.get_catalog()

        snapshot = await store.read()
        assert snapshot is not None
        assert snapshot.timestamp == fake_clock.now
        assert snapshot.expires_in == TTL_MS
        assert len(snapshot.tokens) == 2

    @pytest.mark.asyncio
    async def test_hit_does_not_fetch(self, cache, cmc_client):
        await cache.get_catalog()
        cmc_client.fetch_listings.reset_mock()

        tokens = await cache.get_catalog()

        assert len(tokens) == 2
        cmc_client.fetch_listings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_snapshot_just_inside_ttl_is_served(self, cache, store, cmc_client, fake_clock):
        cached = [CatalogTokenFactory(id=42, symbol="OLD", name="Old Token")]
        await store.write(
            CatalogSnapshot(timestamp=fake_clock.now - TTL_MS + 1, expires_in=TTL_MS, tokens=cached)
        )

        tokens = await cache.get_catalog()

        assert [t.id for t in tokens] == [42]
        cmc_client.fetch_listings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_snapshot_past_ttl_is_refreshed(self, cache, store, cmc_client, fake_clock):
        cached = [CatalogTokenFactory(id=42, symbol="OLD", name="Old Token")]
        await store.write(
            CatalogSnapshot(timestamp=fake_clock.now - TTL_MS - 1, expires_in=TTL_MS, tokens=cached)
        )

        tokens = await cache.get_catalog()

        assert [t.id for t in tokens] == [1, 5001]
        assert cmc_client.fetch_listings.await_count == 2

    @pytest.mark.asyncio
    async def test_expires_after_clock_advances(self, cache, cmc_client, fake_clock):
        await cache.get_catalog()
        fake_clock.advance(TTL_MS)
        cmc_client.fetch_listings.reset_mock()

        await cache.get_catalog()

        assert cmc_client.fetch_listings.await_count == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates_and_writes_nothing(self, cache, store, cmc_client):
        cmc_client.fetch_listings = AsyncMock(
            side_effect=ExternalServiceError(service="coinmarketcap", message="boom", status_code=500)
        )

        with pytest.raises(ExternalServiceError):
            await cache.get_catalog()

        assert await store.read() is None

    @pytest.mark.asyncio
    async def test_failure_does_not_replace_expired_snapshot_silently(
        self, cache, store, cmc_client, fake_clock
    ):
        await store.write(
            CatalogSnapshot(timestamp=fake_clock.now - TTL_MS - 1, expires_in=TTL_MS, tokens=[])
        )
        cmc_client.fetch_listings = AsyncMock(
            side_effect=ExternalServiceError(service="coinmarketcap", message="down")
        )

        with pytest.raises(ExternalServiceError):
            await cache.get_catalog()

    @pytest.mark.asyncio
    async def test_retry_after_failure_fetches_again(self, cache, cmc_client, pages):
        first, second = pages
        cmc_client.fetch_listings = AsyncMock(
            side_effect=[
                ExternalServiceError(service="coinmarketcap", message="down"),
                second,
                first,
                second,
            ]
        )

        with pytest.raises(ExternalServiceError):
            await cache.get_catalog()

        tokens = await cache.get_catalog()
        assert len(tokens) == 2

    @pytest.mark.asyncio
    async def test_concurrent_misses_fetch_once(self, cache, cmc_client):
        results = await asyncio.gather(*(cache.get_catalog() for _ in range(5)))

        assert all(len(tokens) == 2 for tokens in results)
        assert cmc_client.fetch_listings.await_count == 2


class TestRefreshCatalog:
    """Tests for refresh_catalog and last_update_time."""

    @pytest.mark.asyncio
    async def test_refresh_ignores_valid_snapshot(self, cache, cmc_client):
        await cache.get_catalog()
        cmc_client.fetch_listings.reset_mock()

        await cache.refresh_catalog()

        assert cmc_client.fetch_listings.await_count == 2

    @pytest.mark.asyncio
    async def test_refresh_replaces_snapshot(self, cache, store, cmc_client, fake_clock):
        old = [CatalogTokenFactory(id=99, symbol="GONE", name="Gone Token")]
        await store.write(CatalogSnapshot(timestamp=fake_clock.now, expires_in=TTL_MS, tokens=old))

        await cache.refresh_catalog()

        snapshot = await store.read()
        assert 99 not in {t.id for t in snapshot.tokens}

    @pytest.mark.asyncio
    async def test_last_update_none_before_first_fetch(self, cache):
        assert await cache.last_update_time() is None

    @pytest.mark.asyncio
    async def test_last_update_after_refresh(self, cache, fake_clock):
        fake_clock.advance(5000)
        await cache.refresh_catalog()

        assert await cache.last_update_time() == fake_clock.now


class TestFindById:
    """Tests for find_by_id."""

    @pytest.mark.asyncio
    async def test_found(self, cache):
        token = await cache.find_by_id(5001)
        assert token is not None
        assert token.symbol == "LATE"

    @pytest.mark.asyncio
    async def test_not_found(self, cache):
        assert await cache.find_by_id(123456) is None


class TestStats:
    """Cache statistics tests."""

    @pytest.mark.asyncio
    async def test_stats_after_operations(self, cache):
        await cache.get_catalog()  # miss
        await cache.get_catalog()  # hit

        stats = cache.get_stats()

        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["refreshes"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["ttl_ms"] == TTL_MS
