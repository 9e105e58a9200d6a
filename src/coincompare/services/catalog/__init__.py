"""Token catalog cache."""

from coincompare.services.catalog.cache import TokenCatalogCache
from coincompare.services.catalog.models import CatalogSnapshot

__all__ = [
    "CatalogSnapshot",
    "TokenCatalogCache",
]
