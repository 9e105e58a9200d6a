"""Wall clock in epoch milliseconds, the unit both cache files persist."""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)
