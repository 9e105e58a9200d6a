"""Fuzzy ranking of catalog tokens against a search query.

A token is a candidate when its symbol or name contains the query
(case-insensitive). Candidates are scored as::

    2 * match_score(symbol) + match_score(name)

with an exact symbol match short-circuiting to ``EXACT_SYMBOL_SCORE``.
Sorting is stable, so equal scores keep catalog (rank) order.
"""

from collections.abc import Sequence

from coincompare.constants.search import (
    CONSECUTIVE_CHAR_POINTS,
    COVERAGE_POINTS,
    EXACT_SYMBOL_SCORE,
    MAX_SEARCH_RESULTS,
    NAME_WEIGHT,
    PREFIX_BONUS,
    SYMBOL_WEIGHT,
)
from coincompare.services.coinmarketcap.models import CatalogToken


def longest_consecutive_match(text: str, query: str) -> int:
    """Longest run of query characters matched in order from some text position."""
    best = 0
    for i in range(len(text)):
        j = 0
        while i + j < len(text) and j < len(query) and text[i + j] == query[j]:
            j += 1
        best = max(best, j)
    return best


def match_score(text: str, query: str) -> float:
    """Score how well ``text`` matches ``query``.

    consecutive run x 10, plus the share of distinct query characters
    found anywhere in text x 20, plus 50 when text starts with query.
    """
    text = text.lower()
    query = query.lower()
    if not query:
        return 0.0

    consecutive = longest_consecutive_match(text, query) * CONSECUTIVE_CHAR_POINTS
    present = sum(1 for char in set(query) if char in text)
    coverage = present / len(query) * COVERAGE_POINTS
    position = PREFIX_BONUS if text.startswith(query) else 0

    return consecutive + coverage + position


def score_token(token: CatalogToken, query: str) -> float:
    query = query.lower()
    if token.symbol.lower() == query:
        return EXACT_SYMBOL_SCORE

    return SYMBOL_WEIGHT * match_score(token.symbol, query) + NAME_WEIGHT * match_score(
        token.name, query
    )


def is_candidate(token: CatalogToken, query: str) -> bool:
    query = query.lower()
    return query in token.symbol.lower() or query in token.name.lower()


def rank_tokens(
    catalog: Sequence[CatalogToken],
    query: str,
    limit: int = MAX_SEARCH_RESULTS,
) -> list[CatalogToken]:
    """Return matching tokens, best first, at most ``limit`` of them.

    An empty query returns no results without scanning the catalog.
    """
    if not query:
        return []

    query = query.lower()
    scored = [
        (score_token(token, query), token) for token in catalog if is_candidate(token, query)
    ]
    # list.sort is stable with reverse=True: ties keep catalog order
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [token for _, token in scored[:limit]]
