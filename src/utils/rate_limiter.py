import threading
import time
from collections import deque
from typing import Callable, Optional


class RateLimiter:
    """
    At most `max_calls` acquisitions in any `period_sec` window, shared across threads.

    `clock` defaults to time.monotonic; pass a fake to drive it without sleeping.
    """

    def __init__(
        self,
        max_calls: int,
        period_sec: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        self.max_calls = max_calls
        self.period = period_sec
        self._clock = clock
        self._stamps: deque[float] = deque()
        self._cond = threading.Condition()

    def _delay_until_free(self, now: float) -> float:
        """Seconds until a slot opens; 0 means one is free now. Caller holds the lock."""
        while self._stamps and now - self._stamps[0] >= self.period:
            self._stamps.popleft()
        if len(self._stamps) < self.max_calls:
            return 0.0
        return max(0.0, self._stamps[0] + self.period - now)

    def try_acquire(self) -> bool:
        with self._cond:
            now = self._clock()
            if self._delay_until_free(now) > 0:
                return False
            self._stamps.append(now)
            return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block for a slot. False if `timeout` seconds pass first."""
        start = self._clock()
        with self._cond:
            while True:
                now = self._clock()
                delay = self._delay_until_free(now)
                if delay == 0:
                    self._stamps.append(now)
                    return True
                if timeout is not None:
                    left = timeout - (now - start)
                    if left <= 0:
                        return False
                    delay = min(delay, left)
                self._cond.wait(timeout=delay)
