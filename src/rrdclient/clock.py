from __future__ import annotations

import time
from typing import Callable

from .errors import ClockUnavailable

Clock = Callable[[], int]


def system_clock() -> int:
    """Current time in whole seconds since the epoch."""
    try:
        now = time.time()
    except OSError as exc:
        raise ClockUnavailable(f"unable to read system time: {exc}") from exc
    if now < 0:
        raise ClockUnavailable("system time is before the epoch")
    return int(now)


def fixed_clock(timestamp: int) -> Clock:
    def clock() -> int:
        return timestamp

    return clock
