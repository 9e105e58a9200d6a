"""TTL cache of social follower counts keyed by handle."""

import asyncio

import structlog
from pydantic import TypeAdapter

from coincompare.core.clock import Clock, now_ms
from coincompare.data.stores import DocumentStore
from coincompare.services.followers.models import FollowerCount, FollowerEntry

logger = structlog.get_logger(__name__)

FollowerDocument = dict[str, FollowerEntry]
follower_document_adapter: TypeAdapter[FollowerDocument] = TypeAdapter(FollowerDocument)


def normalize_handle(handle: str) -> str:
    return handle.strip().lstrip("@").lower()


def _lookup_entry(document: FollowerDocument, handle: str) -> FollowerEntry | None:
    """Find the entry under the normalized key, then under the handle as written.

    Documents written before keys were lowercased hold mixed-case handles.
    """
    entry = document.get(normalize_handle(handle))
    if entry is None:
        entry = document.get(handle.strip().lstrip("@"))
    return entry


class FollowerCache:
    """Follower counts with a TTL and a guard against zero overwrites.

    A stored zero that is not a suspension means "not known yet" and is
    never served. Storage errors are logged and read as a miss.
    """

    def __init__(
        self,
        store: DocumentStore[FollowerDocument],
        ttl_ms: int,
        clock: Clock = now_ms,
    ) -> None:
        self.store = store
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._lock = asyncio.Lock()

    async def get_cached_followers(self, handle: str) -> FollowerCount | None:
        """Return the cached figure, or None if it must be fetched again."""
        key = normalize_handle(handle)
        try:
            document = await self.store.read()
        except OSError as e:
            logger.warning("follower_cache_read_failed", handle=key, error=str(e))
            return None

        entry = _lookup_entry(document or {}, handle)
        if entry is None or self._clock() - entry.timestamp > self.ttl_ms:
            return None

        if entry.suspended:
            logger.debug("follower_cache_hit", handle=key, suspended=True)
            return FollowerCount(count=0, suspended=True)

        if entry.value == 0:
            return None

        logger.debug("follower_cache_hit", handle=key, followers=entry.value)
        return FollowerCount(count=entry.value, suspended=False)

    async def cache_followers(self, handle: str, count: int, suspended: bool) -> None:
        """Store a figure for ``handle``.

        A zero count keeps any earlier nonzero value; ``suspended`` is
        always stored as given.
        """
        key = normalize_handle(handle)
        async with self._lock:
            try:
                document = dict(await self.store.read() or {})
                previous = _lookup_entry(document, handle)
                value = previous.value if count == 0 and previous and previous.value else count

                document[key] = FollowerEntry(
                    value=value,
                    timestamp=self._clock(),
                    suspended=suspended,
                )
                await self.store.write(document)
            except OSError as e:
                logger.warning("follower_cache_write_failed", handle=key, error=str(e))
