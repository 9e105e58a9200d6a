"""Search response models."""

from pydantic import BaseModel

from coincompare.constants.coinmarketcap import LOGO_URL_TEMPLATE
from coincompare.services.coinmarketcap.models import CatalogToken


class SearchResult(BaseModel):
    """Token as shown in the search dropdown."""

    id: int
    name: str
    symbol: str
    rank: int | None = None
    logo: str

    @classmethod
    def from_token(cls, token: CatalogToken) -> "SearchResult":
        return cls(
            id=token.id,
            name=token.name,
            symbol=token.symbol,
            rank=token.cmc_rank,
            logo=logo_url(token.id),
        )


def logo_url(token_id: int) -> str:
    return LOGO_URL_TEMPLATE.format(id=token_id)
