"""CoinMarketCap API constants."""

from typing import Final

CMC_API_KEY_HEADER: Final[str] = "X-CMC_PRO_API_KEY"

# Full catalog is fetched as two concurrent pages
CATALOG_PAGE_SIZE: Final[int] = 5000
CATALOG_PAGE_COUNT: Final[int] = 2
CATALOG_CONVERT: Final[str] = "USD"

# Listing calls are expensive; a failed refresh is not retried in place
CMC_MAX_RETRIES: Final[int] = 1
CMC_CIRCUIT_BREAKER_THRESHOLD: Final[int] = 5
CMC_CIRCUIT_BREAKER_COOLDOWN: Final[int] = 30

LOGO_URL_TEMPLATE: Final[str] = "https://s2.coinmarketcap.com/static/img/coins/64x64/{id}.png"
