"""Token-bucket limiter for outbound provider calls."""

import threading
import time
from typing import Callable


class RateLimiter:
    """Blocks callers so that at most ``rate`` calls per second go out on average.

    ``capacity`` is the burst size. One instance can be shared by every
    pipeline in the process so concurrent searches respect the same budget.
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._updated = clock()
        self._lock = threading.Lock()

    @classmethod
    def from_interval(cls, interval: float, **kwargs) -> "RateLimiter":
        """Limiter allowing one call every ``interval`` seconds."""
        return cls(1.0 / interval, 1, **kwargs)

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._updated)
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._updated = now

    def acquire(self) -> float:
        """Take one token, sleeping until one is available. Returns the time waited."""
        waited = 0.0
        with self._lock:
            self._refill()
            while self._tokens < 1 - 1e-9:
                delay = (1 - self._tokens) / self.rate
                self._sleep(delay)
                waited += delay
                self._refill()
            self._tokens -= 1
        return waited


class NoopLimiter:
    def acquire(self) -> float:
        return 0.0
