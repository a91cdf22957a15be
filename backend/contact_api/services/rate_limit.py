from __future__ import annotations

import math
import time
from typing import Callable


class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows of ``window_seconds``.

    ``hit`` returns 0 when the request is allowed, otherwise the number of
    seconds until the current window ends.
    """

    def __init__(
        self,
        max_requests: int = 12,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def _prune(self, now: float) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> int:
        if self.max_requests <= 0:
            return 0

        now = self._clock()
        self._prune(now)

        start, count = self._windows.get(key, (now, 0))
        if count >= self.max_requests:
            return max(1, math.ceil(self.window_seconds - (now - start)))

        self._windows[key] = (start, count + 1)
        return 0

    def reset(self) -> None:
        self._windows.clear()
