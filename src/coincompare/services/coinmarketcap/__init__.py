"""CoinMarketCap API client and response models."""

from coincompare.services.coinmarketcap.client import CoinMarketCapClient
from coincompare.services.coinmarketcap.models import (
    CatalogToken,
    TokenInfo,
    TokenQuote,
    TokenUrls,
    UsdQuote,
)

__all__ = [
    "CatalogToken",
    "CoinMarketCapClient",
    "TokenInfo",
    "TokenQuote",
    "TokenUrls",
    "UsdQuote",
]
