"""Health check endpoint with cache status."""

from typing import Any

from fastapi import APIRouter

from coincompare.api.dependencies import ServicesDep, SettingsDep

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(services: ServicesDep, settings: SettingsDep) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        dict with status, version, and catalog cache info.
    """
    return {
        "status": "ok",
        "version": settings.app_version,
        "cache": {
            "backend": services.cache_backend,
            "last_update": await services.catalog_cache.last_update_time(),
            "catalog": services.catalog_cache.get_stats(),
        },
    }
