from __future__ import annotations

import time
from typing import Callable

MS_PER_SECOND = 1000
MS_PER_DAY = 24 * 60 * 60 * MS_PER_SECOND

Clock = Callable[[], int]


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def format_age(age_ms: int) -> str:
    if age_ms < 0:
        return "0s"
    seconds = age_ms // MS_PER_SECOND
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 48:
        return f"{hours}h"
    return f"{hours // 24}d"
