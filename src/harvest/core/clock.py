"""Wall-clock frame delta with an upper bound."""

import time
from typing import Callable

from harvest.core.geometry import clamp

MAX_FRAME_DELTA = 0.033


class FrameClock:
    """Measures time between frames.

    Deltas are capped so a stalled host cannot push a huge step into the
    simulation.
    """

    def __init__(
        self,
        max_delta: float = MAX_FRAME_DELTA,
        now: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.max_delta = max_delta
        self._now = now
        self._last = now()

    def resync(self) -> None:
        """Forget the time elapsed since the last frame."""
        self._last = self._now()

    def tick(self) -> float:
        """Seconds since the previous tick, clamped to [0, max_delta]."""
        current = self._now()
        delta = current - self._last
        self._last = current
        return clamp(delta, 0.0, self.max_delta)
