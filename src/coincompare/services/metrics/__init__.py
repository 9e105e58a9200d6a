"""Comparison metrics for selected tokens."""

from coincompare.services.metrics.models import TokenMetrics, build_token_metrics
from coincompare.services.metrics.service import TokenMetricsService

__all__ = [
    "TokenMetrics",
    "TokenMetricsService",
    "build_token_metrics",
]
