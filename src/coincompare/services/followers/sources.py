"""Follower sources tried in order on a cache miss."""

from typing import Any, Protocol

import structlog

from coincompare.constants.twitter import TWITTER_API_BASE_URL, TWITTER_API_TIMEOUT_SECONDS
from coincompare.services.base import BaseAPIClient
from coincompare.services.followers.models import FollowerLookup, FollowerSource

log = structlog.get_logger(__name__)


class FollowerSourceProtocol(Protocol):
    """A way of resolving a handle to a follower figure.

    Sources return an unknown lookup (``count=None``) when they cannot
    tell, and may raise; the follower service absorbs both.
    """

    name: FollowerSource

    async def lookup(self, handle: str) -> FollowerLookup: ...

    async def close(self) -> None: ...


class TwitterApiSource(BaseAPIClient):
    """Twitter API v2 ``users/by/username`` lookup.

    Rate limits (429) and auth errors surface as ExternalServiceError so
    the next source gets its turn.
    """

    name = FollowerSource.TWITTER_API

    def __init__(self, bearer_token: str) -> None:
        super().__init__(
            service="twitter",
            base_url=TWITTER_API_BASE_URL,
            timeout=TWITTER_API_TIMEOUT_SECONDS,
            headers={"Authorization": f"Bearer {bearer_token}"},
            max_retries=1,
        )

    async def lookup(self, handle: str) -> FollowerLookup:
        payload = await self.get_json(
            f"/2/users/by/username/{handle}",
            params={"user.fields": "public_metrics"},
        )

        if _is_suspended(payload):
            log.info("twitter_api_suspended", handle=handle)
            return FollowerLookup(count=0, suspended=True, source=self.name)

        count = ((payload.get("data") or {}).get("public_metrics") or {}).get("followers_count")
        if not isinstance(count, int) or count < 0:
            log.warning("twitter_api_unexpected_payload", handle=handle, keys=list(payload))
            return FollowerLookup(source=self.name)

        return FollowerLookup(count=count, source=self.name)


def _is_suspended(payload: dict[str, Any]) -> bool:
    for error in payload.get("errors") or []:
        detail = str(error.get("detail", "")) if isinstance(error, dict) else ""
        if "suspended" in detail.lower():
            return True
    return False
