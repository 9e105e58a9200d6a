"""Token search endpoint."""

from typing import Annotated

import structlog
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from coincompare.api.dependencies import CatalogCacheDep
from coincompare.core.exceptions import CoinCompareError
from coincompare.services.search.models import SearchResult
from coincompare.services.search.ranking import rank_tokens

log = structlog.get_logger(__name__)

router = APIRouter(tags=["search"])


class SearchResponse(BaseModel):
    """Search dropdown results."""

    tokens: list[SearchResult]


@router.get("/search", response_model=SearchResponse)
async def search_tokens(
    catalog: CatalogCacheDep,
    query: Annotated[str | None, Query(max_length=100)] = None,
    token_id: Annotated[int | None, Query(alias="id", ge=1)] = None,
) -> SearchResponse:
    """
    Search the cached catalog.

    ``id`` looks up a single token; otherwise ``query`` is ranked against
    symbols and names. With neither, returns an empty list without
    touching the catalog.
    """
    text = (query or "").strip()
    if token_id is None and not text:
        return SearchResponse(tokens=[])

    try:
        if token_id is not None:
            token = await catalog.find_by_id(token_id)
            tokens = [token] if token is not None else []
        else:
            tokens = rank_tokens(await catalog.get_catalog(), text)
    except CoinCompareError as e:
        log.error("search_failed", query=text, token_id=token_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search tokens",
        ) from e

    return SearchResponse(tokens=[SearchResult.from_token(token) for token in tokens])
