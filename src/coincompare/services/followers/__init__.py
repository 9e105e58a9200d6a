"""Social follower enrichment."""

from coincompare.services.followers.cache import (
    FollowerCache,
    follower_document_adapter,
    normalize_handle,
)
from coincompare.services.followers.models import (
    FollowerCount,
    FollowerEntry,
    FollowerLookup,
    FollowerSource,
)
from coincompare.services.followers.scraper import BrowserFollowerScraper, parse_followers_count
from coincompare.services.followers.service import FollowerService, build_follower_sources
from coincompare.services.followers.sources import TwitterApiSource

__all__ = [
    "BrowserFollowerScraper",
    "FollowerCache",
    "FollowerCount",
    "FollowerEntry",
    "FollowerLookup",
    "FollowerService",
    "FollowerSource",
    "TwitterApiSource",
    "build_follower_sources",
    "follower_document_adapter",
    "normalize_handle",
    "parse_followers_count",
]
