"""Test data factories using factory_boy.

These factories generate realistic test data for CoinCompare models.
"""

from tests.factories.token import (
    CatalogTokenFactory,
    TokenInfoFactory,
    TokenQuoteFactory,
    UsdQuoteFactory,
    listing_payload,
)

__all__ = [
    "CatalogTokenFactory",
    "TokenInfoFactory",
    "TokenQuoteFactory",
    "UsdQuoteFactory",
    "listing_payload",
]
