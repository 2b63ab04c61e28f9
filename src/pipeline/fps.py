"""
Frames-per-second sampling for the realtime loop.

Completed passes are counted in non-overlapping windows: once at least one
second has elapsed since the last reset, fps = round(count * 1000 / elapsed_ms)
and both the counter and the window start are reset.
"""

from __future__ import annotations

import time
from typing import Callable, Optional


class FpsMeter:
    def __init__(self, clock: Callable[[], float] = time.perf_counter, window_ms: float = 1000.0):
        self._clock = clock
        self._window_ms = window_ms
        self._count = 0
        self._window_start = clock()
        self.fps = 0

    def reset(self, now: Optional[float] = None) -> None:
        self._count = 0
        self._window_start = self._clock() if now is None else now

    def tick(self, now: Optional[float] = None) -> Optional[int]:
        """
        Record one completed pass.

        Returns:
            The new fps sample when a window closes, otherwise None.
        """
        now = self._clock() if now is None else now
        self._count += 1
        elapsed_ms = (now - self._window_start) * 1000.0
        if elapsed_ms < self._window_ms:
            return None
        self.fps = round(self._count * 1000.0 / elapsed_ms)
        self._count = 0
        self._window_start = now
        return self.fps
