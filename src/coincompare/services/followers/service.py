"""Follower enrichment with caching and source fallback."""

from collections.abc import Sequence

import structlog

from coincompare.config.settings import Settings
from coincompare.services.followers.cache import FollowerCache, normalize_handle
from coincompare.services.followers.models import FollowerCount, FollowerLookup
from coincompare.services.followers.scraper import BrowserFollowerScraper
from coincompare.services.followers.sources import FollowerSourceProtocol, TwitterApiSource

logger = structlog.get_logger(__name__)


class FollowerService:
    """Resolves a handle to a follower count.

    Priority: Cache -> sources in order -> unknown (reported as 0)

    Never raises: a failing source is logged and the next one is tried.
    """

    def __init__(
        self,
        cache: FollowerCache,
        sources: Sequence[FollowerSourceProtocol],
    ) -> None:
        self.cache = cache
        self.sources = list(sources)

    async def get_followers(self, handle: str) -> FollowerCount:
        """Get the follower figure for ``handle``.

        1. Check cache
        2. Try each source until one knows the count or sees a suspension
        3. Write the outcome back to the cache, unknown stored as 0
        """
        cached = await self.cache.get_cached_followers(handle)
        if cached is not None:
            return cached

        handle = normalize_handle(handle)

        lookup = await self._lookup(handle)
        count = lookup.count or 0

        await self.cache.cache_followers(handle, count, lookup.suspended)
        return FollowerCount(count=count, suspended=lookup.suspended)

    async def _lookup(self, handle: str) -> FollowerLookup:
        for source in self.sources:
            try:
                result = await source.lookup(handle)
            except Exception as e:
                logger.warning(
                    "follower_source_failed",
                    handle=handle,
                    source=source.name.value,
                    error=str(e),
                )
                continue

            if result.is_known:
                logger.info(
                    "follower_source_resolved",
                    handle=handle,
                    source=source.name.value,
                    followers=result.count,
                    suspended=result.suspended,
                )
                return result

            logger.info("follower_source_unknown", handle=handle, source=source.name.value)

        logger.warning("follower_count_unknown", handle=handle)
        return FollowerLookup()

    async def close(self) -> None:
        """Close all sources."""
        for source in self.sources:
            await source.close()


def build_follower_sources(settings: Settings) -> list[FollowerSourceProtocol]:
    """Sources in fallback order: Twitter API (if configured), then browser scrape."""
    sources: list[FollowerSourceProtocol] = []

    bearer_token = settings.twitter_bearer_token.get_secret_value()
    if bearer_token:
        sources.append(TwitterApiSource(bearer_token))

    if settings.scraper_enabled:
        sources.append(
            BrowserFollowerScraper(
                headless=settings.scraper_headless,
                timeout_ms=settings.scraper_timeout_ms,
            )
        )

    return sources
