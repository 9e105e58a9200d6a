"""Shared pytest fixtures for CoinCompare tests.

This module provides fixtures for:
- Test environment settings (memory caches, no browser)
- A controllable millisecond clock for TTL tests
- Catalog token factories
- A mocked CoinMarketCap client

Usage:
    @pytest.mark.asyncio
    async def test_something(catalog_token_factory, fake_clock):
        token = catalog_token_factory(symbol="ETH")
"""

import os
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.factories.token import CatalogTokenFactory, TokenInfoFactory, TokenQuoteFactory

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables.

    Caches stay in memory and the browser scrape is disabled unless a
    test opts in.
    """
    original_env = os.environ.copy()

    os.environ.setdefault("CMC_API_KEY", "test-cmc-key")
    os.environ.setdefault("CACHE_BACKEND", "memory")
    os.environ.setdefault("SCRAPER_ENABLED", "false")
    os.environ.setdefault("TWITTER_BEARER_TOKEN", "")

    from coincompare.config.settings import get_settings

    get_settings.cache_clear()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a frozen clock for TTL tests."""
    return FakeClock()


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def catalog_token_factory() -> type[CatalogTokenFactory]:
    """Provide catalog token factory."""
    return CatalogTokenFactory


@pytest.fixture
def token_quote_factory() -> type[TokenQuoteFactory]:
    """Provide token quote factory."""
    return TokenQuoteFactory


@pytest.fixture
def token_info_factory() -> type[TokenInfoFactory]:
    """Provide token info factory."""
    return TokenInfoFactory


# =============================================================================
# Mock External APIs
# =============================================================================


@pytest.fixture
def mock_cmc_client() -> MagicMock:
    """Mock CoinMarketCap client.

    ``fetch_listings`` returns an empty page by default.
    """
    mock = MagicMock()
    mock.fetch_listings = AsyncMock(return_value=[])
    mock.fetch_quotes = AsyncMock(return_value={})
    mock.fetch_info = AsyncMock(return_value={})
    mock.close = AsyncMock()
    return mock
