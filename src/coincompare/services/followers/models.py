"""Follower count models."""

from enum import Enum

from pydantic import BaseModel, Field


class FollowerSource(str, Enum):
    """Where a follower figure came from."""

    TWITTER_API = "twitter_api"
    BROWSER = "browser"
    NONE = "none"


class FollowerEntry(BaseModel):
    """Persisted cache entry, stored as ``{handle: {value, timestamp, suspended}}``."""

    value: int = Field(ge=0)
    timestamp: int
    suspended: bool = False


class FollowerCount(BaseModel):
    """Follower figure returned to the metrics endpoint."""

    count: int = Field(default=0, ge=0)
    suspended: bool = False


class FollowerLookup(BaseModel):
    """Result of one follower source.

    ``count`` is None when the source could not tell, which is distinct
    from an account that really has zero followers.
    """

    count: int | None = Field(default=None, ge=0)
    suspended: bool = False
    source: FollowerSource = FollowerSource.NONE

    @property
    def is_known(self) -> bool:
        return self.suspended or self.count is not None
