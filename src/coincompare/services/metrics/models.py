"""Comparison-table metrics model."""

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from coincompare.services.coinmarketcap.models import TokenInfo, TokenQuote
from coincompare.services.followers.models import FollowerCount
from coincompare.services.search.models import logo_url

_DIGIT_THEN_UPPER = re.compile(r"(\d)([A-Z])")


def to_client_alias(name: str) -> str:
    """camelCase, keeping units lowercase: ``percent_change_24h`` -> ``percentChange24h``."""
    return _DIGIT_THEN_UPPER.sub(lambda m: m.group(1) + m.group(2).lower(), to_camel(name))


class TokenMetrics(BaseModel):
    """One column of the comparison table.

    Serialized with camelCase keys (``marketCap``, ``percentChange24h``...)
    for the browser client.
    """

    model_config = ConfigDict(alias_generator=to_client_alias, populate_by_name=True)

    id: int
    name: str
    symbol: str
    logo: str
    rank: int | None = None

    price: float = 0.0
    market_cap: float = 0.0
    fully_diluted_market_cap: float = 0.0
    circulating_market_cap: float = 0.0
    volume_24h: float = 0.0
    volume_change_24h: float = 0.0
    percent_change_1h: float = 0.0
    percent_change_24h: float = 0.0
    percent_change_7d: float = 0.0
    percent_change_30d: float = 0.0
    percent_change_60d: float = 0.0
    percent_change_90d: float = 0.0

    total_supply: float = 0.0
    circulating_supply: float = 0.0
    max_supply: float | None = None
    circulating_supply_percent: float = 0.0
    dominance: float = 0.0
    turnover: float = 0.0
    market_pairs: int = 0

    twitter_followers: int = 0
    twitter_suspended: bool = False

    website: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    reddit: str | None = None
    github: str | None = None
    twitter_username: str | None = None


def build_token_metrics(
    quote: TokenQuote,
    info: TokenInfo | None,
    followers: FollowerCount,
) -> TokenMetrics:
    """Join a live quote, its metadata and the follower figure."""
    usd = quote.usd

    market_cap = usd.market_cap or usd.fully_diluted_market_cap or 0.0
    fully_diluted = usd.fully_diluted_market_cap or usd.market_cap or 0.0
    volume = usd.volume_24h or 0.0
    circulating = quote.circulating_supply or 0.0

    supply_base = quote.max_supply or quote.total_supply
    circulating_percent = circulating / supply_base * 100 if supply_base else 0.0

    urls = info.urls if info is not None else None

    return TokenMetrics(
        id=quote.id,
        name=quote.name,
        symbol=quote.symbol,
        logo=(info.logo if info is not None and info.logo else logo_url(quote.id)),
        rank=quote.cmc_rank,
        price=usd.price or 0.0,
        market_cap=market_cap,
        fully_diluted_market_cap=fully_diluted,
        circulating_market_cap=usd.market_cap or 0.0,
        volume_24h=volume,
        volume_change_24h=usd.volume_change_24h or 0.0,
        percent_change_1h=usd.percent_change_1h or 0.0,
        percent_change_24h=usd.percent_change_24h or 0.0,
        percent_change_7d=usd.percent_change_7d or 0.0,
        percent_change_30d=usd.percent_change_30d or 0.0,
        percent_change_60d=usd.percent_change_60d or 0.0,
        percent_change_90d=usd.percent_change_90d or 0.0,
        total_supply=quote.total_supply or 0.0,
        circulating_supply=circulating,
        max_supply=quote.max_supply,
        circulating_supply_percent=circulating_percent,
        dominance=usd.market_cap_dominance or 0.0,
        turnover=volume / market_cap if market_cap else 0.0,
        market_pairs=quote.num_market_pairs or 0,
        twitter_followers=followers.count,
        twitter_suspended=followers.suspended,
        website=_first(urls.website) if urls else None,
        twitter=_first(urls.twitter) if urls else None,
        telegram=next((url for url in urls.chat if "t.me" in url), None) if urls else None,
        reddit=_first(urls.reddit) if urls else None,
        github=_first(urls.source_code) if urls else None,
        twitter_username=(info.twitter_username or None) if info is not None else None,
    )


def _first(values: list[str]) -> str | None:
    return values[0] if values else None
