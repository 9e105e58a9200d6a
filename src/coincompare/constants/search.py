"""Search ranking weights.

Result ordering is reproducible only while these stay fixed.
"""

from typing import Final

EXACT_SYMBOL_SCORE: Final[int] = 1000
SYMBOL_WEIGHT: Final[int] = 2
NAME_WEIGHT: Final[int] = 1

CONSECUTIVE_CHAR_POINTS: Final[int] = 10
COVERAGE_POINTS: Final[int] = 20
PREFIX_BONUS: Final[int] = 50

MAX_SEARCH_RESULTS: Final[int] = 50
