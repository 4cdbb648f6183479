"""Clock sources used to measure elapsed waiting time."""

from __future__ import annotations

import time
from typing import Callable


Clock = Callable[[], float]


def monotonic_clock() -> float:
    return time.monotonic()


class ManualClock:
    """Clock advanced explicitly by the caller, for planning runs and tests."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def __call__(self) -> float:
        return self._now

    @property
    def now(self) -> float:
        return self._now

    def set(self, now: float) -> None:
        if now < self._now:
            raise ValueError("manual clock cannot move backwards")
        self._now = float(now)

    def advance(self, delta: float) -> float:
        if delta < 0:
            raise ValueError("manual clock delta must be >= 0")
        self._now += delta
        return self._now
