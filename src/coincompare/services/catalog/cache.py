"""TTL cache for the full CoinMarketCap token catalog."""

import asyncio

import structlog

from coincompare.constants.coinmarketcap import CATALOG_PAGE_COUNT, CATALOG_PAGE_SIZE
from coincompare.core.clock import Clock, now_ms
from coincompare.data.stores import DocumentStore
from coincompare.services.catalog.models import CatalogSnapshot
from coincompare.services.coinmarketcap.client import CoinMarketCapClient
from coincompare.services.coinmarketcap.models import CatalogToken

logger = structlog.get_logger(__name__)


class TokenCatalogCache:
    """Keeps one catalog snapshot and refreshes it when it expires.

    Reads never wait on a refresh while the stored snapshot is still
    valid. Refreshes are serialized by a lock, so concurrent misses
    trigger a single upstream fetch.
    """

    def __init__(
        self,
        client: CoinMarketCapClient,
        store: DocumentStore[CatalogSnapshot],
        ttl_ms: int,
        clock: Clock = now_ms,
        page_size: int = CATALOG_PAGE_SIZE,
        page_count: int = CATALOG_PAGE_COUNT,
    ) -> None:
        """Initialize catalog cache.

        Args:
            client: CoinMarketCap API client
            store: Where the snapshot is kept (memory or file)
            ttl_ms: Snapshot validity in milliseconds
            clock: Epoch-millisecond clock
            page_size: Entries per listings page
            page_count: Pages fetched concurrently per refresh
        """
        self.client = client
        self.store = store
        self.ttl_ms = ttl_ms
        self.page_size = page_size
        self.page_count = page_count
        self._clock = clock
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0
        self._refreshes = 0

    async def get_catalog(self) -> list[CatalogToken]:
        """Return the cached catalog, refreshing first if missing or expired.

        Raises:
            ExternalServiceError: If a needed refresh fails upstream.
            CircuitBreakerOpenError: If CoinMarketCap is currently blocked.
        """
        snapshot = await self.store.read()
        if snapshot is not None and snapshot.is_valid(self._clock()):
            self._hits += 1
            return snapshot.tokens

        async with self._lock:
            # Another request may have refreshed while we waited
            snapshot = await self.store.read()
            if snapshot is not None and snapshot.is_valid(self._clock()):
                self._hits += 1
                return snapshot.tokens

            self._misses += 1
            logger.info(
                "catalog_cache_miss",
                reason="missing" if snapshot is None else "expired",
            )
            return await self._fetch_and_store()

    async def refresh_catalog(self) -> list[CatalogToken]:
        """Fetch the full catalog and replace the snapshot unconditionally."""
        async with self._lock:
            logger.info("catalog_refresh_requested")
            return await self._fetch_and_store()

    async def last_update_time(self) -> int | None:
        """Creation time of the stored snapshot in epoch ms, None if never fetched."""
        snapshot = await self.store.read()
        return snapshot.timestamp if snapshot is not None else None

    async def find_by_id(self, token_id: int) -> CatalogToken | None:
        """Look up one catalog entry by CoinMarketCap id."""
        for token in await self.get_catalog():
            if token.id == token_id:
                return token
        return None

    async def _fetch_and_store(self) -> list[CatalogToken]:
        pages = await asyncio.gather(
            *(
                self.client.fetch_listings(start=1 + i * self.page_size, limit=self.page_size)
                for i in range(self.page_count)
            )
        )
        tokens = [token for page in pages for token in page]

        snapshot = CatalogSnapshot(
            timestamp=self._clock(),
            expires_in=self.ttl_ms,
            tokens=tokens,
        )
        try:
            await self.store.write(snapshot)
        except OSError as e:
            # Data is good; only persistence failed, next read refetches
            logger.warning("catalog_store_write_failed", error=str(e))

        self._refreshes += 1
        logger.info("catalog_refreshed", token_count=len(tokens), pages=len(pages))
        return tokens

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            dict with cache stats
        """
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0

        return {
            "ttl_ms": self.ttl_ms,
            "hits": self._hits,
            "misses": self._misses,
            "refreshes": self._refreshes,
            "hit_rate": round(hit_rate, 4),
        }
