"""Catalog cache management endpoints.

Each route is also served under its legacy path.
"""

import structlog
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from coincompare.api.dependencies import CatalogCacheDep
from coincompare.core.exceptions import CoinCompareError

log = structlog.get_logger(__name__)

router = APIRouter(tags=["cache"])


class RefreshResponse(BaseModel):
    success: bool


class CacheStatusResponse(BaseModel):
    """Catalog freshness, ``lastUpdate`` in epoch ms."""

    model_config = ConfigDict(populate_by_name=True)

    last_update: int | None = Field(default=None, alias="lastUpdate")


@router.post("/tokens/refresh", response_model=RefreshResponse)
@router.post("/refresh-cache", response_model=RefreshResponse)
async def refresh_cache(catalog: CatalogCacheDep) -> RefreshResponse:
    """Force a full catalog refresh."""
    try:
        await catalog.refresh_catalog()
    except CoinCompareError as e:
        log.error("cache_refresh_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to refresh cache",
        ) from e

    return RefreshResponse(success=True)


@router.get("/tokens/status", response_model=CacheStatusResponse)
@router.get("/cache-status", response_model=CacheStatusResponse)
async def cache_status(catalog: CatalogCacheDep) -> CacheStatusResponse:
    """Report when the catalog was last fetched."""
    return CacheStatusResponse(last_update=await catalog.last_update_time())
