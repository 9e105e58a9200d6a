"""Catalog snapshot model."""

from pydantic import BaseModel, ConfigDict, Field

from coincompare.services.coinmarketcap.models import CatalogToken


class CatalogSnapshot(BaseModel):
    """Full catalog as fetched at one instant.

    Persisted as ``{"timestamp", "expiresIn", "tokens"}``; both times are
    epoch milliseconds.

    Attributes:
        tokens: Catalog entries in page order.
        timestamp: Creation instant.
        expires_in: Validity duration.
    """

    model_config = ConfigDict(populate_by_name=True)

    timestamp: int
    expires_in: int = Field(alias="expiresIn")
    tokens: list[CatalogToken] = Field(default_factory=list)

    def is_valid(self, now: int) -> bool:
        return now - self.timestamp < self.expires_in
