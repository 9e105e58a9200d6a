"""Pydantic models for CoinMarketCap API responses.

Only the fields the comparison view uses are declared; everything else
CoinMarketCap returns is kept on the model (``extra="allow"``) so cached
snapshots round-trip without loss.

API Documentation: https://coinmarketcap.com/api/documentation/v1/
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UsdQuote(BaseModel):
    """USD quote block of a listing or quote entry."""

    model_config = ConfigDict(extra="allow")

    price: float | None = None
    volume_24h: float | None = None
    volume_change_24h: float | None = None
    market_cap: float | None = None
    market_cap_dominance: float | None = None
    fully_diluted_market_cap: float | None = None
    percent_change_1h: float | None = None
    percent_change_24h: float | None = None
    percent_change_7d: float | None = None
    percent_change_30d: float | None = None
    percent_change_60d: float | None = None
    percent_change_90d: float | None = None


class CatalogToken(BaseModel):
    """One entry of the full token catalog (``listings/latest``).

    Attributes:
        id: Stable CoinMarketCap id, unique within a snapshot.
        name: Display name (e.g., Bitcoin).
        symbol: Ticker; not unique across chains.
        cmc_rank: Market cap rank.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    name: str
    symbol: str
    slug: str | None = None
    cmc_rank: int | None = None
    num_market_pairs: int | None = None
    circulating_supply: float | None = None
    total_supply: float | None = None
    max_supply: float | None = None
    quote: dict[str, UsdQuote] = Field(default_factory=dict)

    @property
    def usd(self) -> UsdQuote:
        return self.quote.get("USD") or UsdQuote()


class TokenUrls(BaseModel):
    """Project links from ``cryptocurrency/info``."""

    model_config = ConfigDict(extra="allow")

    website: list[str] = Field(default_factory=list)
    twitter: list[str] = Field(default_factory=list)
    chat: list[str] = Field(default_factory=list)
    reddit: list[str] = Field(default_factory=list)
    source_code: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class TokenInfo(BaseModel):
    """Static metadata from ``v2/cryptocurrency/info``."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None
    symbol: str | None = None
    logo: str | None = None
    twitter_username: str | None = None
    urls: TokenUrls = Field(default_factory=TokenUrls)


class TokenQuote(CatalogToken):
    """Latest quote for one token (``v2/cryptocurrency/quotes/latest``).

    Same shape as a catalog entry, fetched live for the metrics view.
    """
