"""Token metrics for the comparison view."""

import asyncio
from collections.abc import Sequence

import structlog

from coincompare.services.coinmarketcap.client import CoinMarketCapClient
from coincompare.services.followers.models import FollowerCount
from coincompare.services.followers.service import FollowerService
from coincompare.services.metrics.models import TokenMetrics, build_token_metrics

logger = structlog.get_logger(__name__)


class TokenMetricsService:
    """Builds enriched metrics for a list of CoinMarketCap ids.

    Quote and metadata failures propagate; follower lookups never fail
    the request and fall back to zero.
    """

    def __init__(self, client: CoinMarketCapClient, followers: FollowerService) -> None:
        self.client = client
        self.followers = followers

    async def get_metrics(self, ids: Sequence[int]) -> dict[str, TokenMetrics]:
        """Return metrics keyed by string id, in request order.

        Ids CoinMarketCap does not quote are left out.

        Raises:
            ExternalServiceError: If the quotes or info request fails.
        """
        if not ids:
            return {}

        quotes, infos = await asyncio.gather(
            self.client.fetch_quotes(ids),
            self.client.fetch_info(ids),
        )

        result: dict[str, TokenMetrics] = {}
        for token_id in dict.fromkeys(str(i) for i in ids):
            quote = quotes.get(token_id)
            if quote is None:
                logger.info("token_metrics_missing_quote", token_id=token_id)
                continue

            info = infos.get(token_id)
            handle = info.twitter_username if info is not None else None
            followers = await self.followers.get_followers(handle) if handle else FollowerCount()

            result[token_id] = build_token_metrics(quote, info, followers)

        logger.info("token_metrics_built", requested=len(ids), returned=len(result))
        return result
