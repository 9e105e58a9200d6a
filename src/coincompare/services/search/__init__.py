"""Token search ranking."""

from coincompare.services.search.models import SearchResult, logo_url
from coincompare.services.search.ranking import match_score, rank_tokens, score_token

__all__ = [
    "SearchResult",
    "logo_url",
    "match_score",
    "rank_tokens",
    "score_token",
]
