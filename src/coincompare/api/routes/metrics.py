"""Token metrics endpoint."""

from typing import Annotated

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from coincompare.api.dependencies import MetricsServiceDep
from coincompare.core.exceptions import CoinCompareError
from coincompare.services.metrics.models import TokenMetrics

log = structlog.get_logger(__name__)

router = APIRouter(tags=["metrics"])

MAX_IDS_PER_REQUEST = 20


def parse_ids(raw: str | None) -> list[int]:
    """Parse a comma separated id list, rejecting anything non-numeric."""
    parts = [part.strip() for part in (raw or "").split(",") if part.strip()]
    try:
        ids = [int(part) for part in parts]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ids must be a comma separated list of numeric ids",
        ) from None

    if not ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ids parameter is required",
        )
    if len(ids) > MAX_IDS_PER_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {MAX_IDS_PER_REQUEST} ids per request",
        )
    return ids


@router.get("/token-metrics", response_model=dict[str, TokenMetrics])
async def get_token_metrics(
    metrics: MetricsServiceDep,
    ids: Annotated[str | None, Query()] = None,
) -> dict[str, TokenMetrics]:
    """
    Get comparison metrics for the selected tokens.

    Returns a map of id to metrics. Missing follower figures are reported
    as zero rather than failing the request.
    """
    token_ids = parse_ids(ids)

    try:
        return await metrics.get_metrics(token_ids)
    except CoinCompareError as e:
        log.error("token_metrics_failed", ids=token_ids, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch token metrics",
        ) from e
