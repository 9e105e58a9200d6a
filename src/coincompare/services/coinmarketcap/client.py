"""CoinMarketCap Pro API client.

Endpoints used:
    - GET /v1/cryptocurrency/listings/latest - Full catalog, paginated
    - GET /v2/cryptocurrency/quotes/latest - Live quotes by id
    - GET /v2/cryptocurrency/info - Logos, links and social handles by id

Every call costs API credits, so requests are made once: a failure is
reported to the caller instead of being retried here.
"""

from collections.abc import Iterable
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from coincompare.config import get_settings
from coincompare.constants.coinmarketcap import (
    CATALOG_CONVERT,
    CMC_API_KEY_HEADER,
    CMC_CIRCUIT_BREAKER_COOLDOWN,
    CMC_CIRCUIT_BREAKER_THRESHOLD,
    CMC_MAX_RETRIES,
)
from coincompare.core.exceptions import ExternalServiceError
from coincompare.services.base import BaseAPIClient
from coincompare.services.coinmarketcap.models import CatalogToken, TokenInfo, TokenQuote

log = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CoinMarketCapClient(BaseAPIClient):
    """CoinMarketCap API client.

    Example:
        client = CoinMarketCapClient(api_key="...")
        try:
            tokens = await client.fetch_listings(start=1, limit=5000)
        finally:
            await client.close()
    """

    SERVICE = "coinmarketcap"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        key = api_key if api_key is not None else settings.cmc_api_key.get_secret_value()

        super().__init__(
            service=self.SERVICE,
            base_url=base_url or settings.cmc_base_url,
            timeout=timeout or settings.cmc_timeout_seconds,
            headers={CMC_API_KEY_HEADER: key, "Accept": "application/json"},
            max_retries=CMC_MAX_RETRIES,
            circuit_breaker_threshold=CMC_CIRCUIT_BREAKER_THRESHOLD,
            circuit_breaker_cooldown=CMC_CIRCUIT_BREAKER_COOLDOWN,
        )

    async def fetch_listings(self, start: int, limit: int) -> list[CatalogToken]:
        """Fetch one page of the full catalog.

        Args:
            start: 1-based offset of the first entry.
            limit: Page size.

        Returns:
            Tokens in CoinMarketCap rank order. Entries that fail validation
            are logged and skipped.

        Raises:
            ExternalServiceError: On HTTP failure or when ``data`` is not a list.
        """
        log.info("cmc_listings_fetching", start=start, end=start + limit - 1)

        payload = await self.get_json(
            "/v1/cryptocurrency/listings/latest",
            params={"start": start, "limit": limit, "convert": CATALOG_CONVERT},
        )
        data = payload.get("data")
        if not isinstance(data, list):
            raise ExternalServiceError(
                service=self.SERVICE,
                message=f"listings page {start} has no data list",
            )

        tokens = []
        for item in data:
            try:
                tokens.append(CatalogToken.model_validate(item))
            except ValidationError as e:
                log.warning("cmc_listing_parse_error", start=start, error=str(e))

        log.info("cmc_listings_fetched", start=start, count=len(tokens))
        return tokens

    async def fetch_quotes(self, ids: Iterable[int]) -> dict[str, TokenQuote]:
        """Fetch live quotes keyed by the string id CoinMarketCap returns."""
        payload = await self.get_json(
            "/v2/cryptocurrency/quotes/latest",
            params={"id": _join_ids(ids), "convert": CATALOG_CONVERT},
        )
        return self._parse_keyed(payload, TokenQuote, "quotes")

    async def fetch_info(self, ids: Iterable[int]) -> dict[str, TokenInfo]:
        """Fetch token metadata keyed by string id."""
        payload = await self.get_json(
            "/v2/cryptocurrency/info",
            params={"id": _join_ids(ids)},
        )
        return self._parse_keyed(payload, TokenInfo, "info")

    def _parse_keyed(
        self,
        payload: dict[str, Any],
        model: type[ModelT],
        endpoint: str,
    ) -> dict[str, ModelT]:
        data = payload.get("data")
        if not isinstance(data, dict):
            raise ExternalServiceError(
                service=self.SERVICE,
                message=f"{endpoint} response has no data object",
            )

        parsed: dict[str, ModelT] = {}
        for key, item in data.items():
            # Symbol lookups return a list per key; id lookups a single object
            if isinstance(item, list):
                if not item:
                    continue
                item = item[0]
            try:
                parsed[str(key)] = model.model_validate(item)
            except ValidationError as e:
                log.warning("cmc_entry_parse_error", endpoint=endpoint, key=key, error=str(e))
        return parsed


def _join_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in ids)
