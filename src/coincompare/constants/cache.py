"""Cache constants shared by the catalog and follower caches."""

from typing import Final

# 4 hours, in milliseconds to match the persisted snapshot format
DEFAULT_CACHE_DURATION_MS: Final[int] = 4 * 60 * 60 * 1000

TOKEN_LIST_CACHE_FILENAME: Final[str] = "token-list-cache.json"
FOLLOWER_CACHE_FILENAME: Final[str] = "twitter-followers-cache.json"
