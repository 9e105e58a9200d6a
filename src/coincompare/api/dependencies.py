"""FastAPI dependencies for dependency injection.

Services live on ``app.state.services``, built by the lifespan in
``coincompare.api.app``. Tests swap them through ``dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from coincompare.config.settings import Settings, get_settings
from coincompare.services.catalog.cache import TokenCatalogCache
from coincompare.services.container import Services
from coincompare.services.metrics.service import TokenMetricsService

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_services(request: Request) -> Services:
    """Get the service graph built at startup."""
    services: Services = request.app.state.services
    return services


def get_catalog_cache(request: Request) -> TokenCatalogCache:
    """Get token catalog cache dependency."""
    return get_services(request).catalog_cache


def get_metrics_service(request: Request) -> TokenMetricsService:
    """Get token metrics service dependency."""
    return get_services(request).metrics_service


ServicesDep = Annotated[Services, Depends(get_services)]
CatalogCacheDep = Annotated[TokenCatalogCache, Depends(get_catalog_cache)]
MetricsServiceDep = Annotated[TokenMetricsService, Depends(get_metrics_service)]
