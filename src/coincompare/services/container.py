"""Process-wide service graph, built once at startup."""

from dataclasses import dataclass

import structlog
from pydantic import TypeAdapter

from coincompare.config.settings import Settings
from coincompare.data.stores import build_store
from coincompare.services.catalog.cache import TokenCatalogCache
from coincompare.services.catalog.models import CatalogSnapshot
from coincompare.services.coinmarketcap.client import CoinMarketCapClient
from coincompare.services.followers.cache import FollowerCache, follower_document_adapter
from coincompare.services.followers.service import FollowerService, build_follower_sources
from coincompare.services.metrics.service import TokenMetricsService

log = structlog.get_logger(__name__)


@dataclass
class Services:
    """Long-lived services shared by all requests."""

    cmc_client: CoinMarketCapClient
    catalog_cache: TokenCatalogCache
    follower_service: FollowerService
    metrics_service: TokenMetricsService
    cache_backend: str

    async def close(self) -> None:
        await self.follower_service.close()
        await self.cmc_client.close()


def build_services(settings: Settings) -> Services:
    """Wire clients, caches and services from settings."""
    backend = settings.effective_cache_backend

    cmc_client = CoinMarketCapClient(
        api_key=settings.cmc_api_key.get_secret_value(),
        base_url=settings.cmc_base_url,
        timeout=settings.cmc_timeout_seconds,
    )
    catalog_cache = TokenCatalogCache(
        client=cmc_client,
        store=build_store(
            backend, settings.token_list_cache_file, TypeAdapter(CatalogSnapshot)
        ),
        ttl_ms=settings.token_list_cache_duration,
    )
    follower_cache = FollowerCache(
        store=build_store(backend, settings.follower_cache_file, follower_document_adapter),
        ttl_ms=settings.twitter_cache_duration,
    )
    follower_service = FollowerService(follower_cache, build_follower_sources(settings))

    log.info(
        "services_built",
        cache_backend=backend,
        follower_sources=[source.name.value for source in follower_service.sources],
    )
    return Services(
        cmc_client=cmc_client,
        catalog_cache=catalog_cache,
        follower_service=follower_service,
        metrics_service=TokenMetricsService(cmc_client, follower_service),
        cache_backend=backend,
    )
