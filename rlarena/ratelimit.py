"""In-memory token-bucket rate limiting."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable

Clock = Callable[[], float]


class TokenBucket:
    """A token bucket refilled by ``refill_rate`` tokens per whole elapsed second."""

    def __init__(self, capacity: int, refill_rate: int, *, clock: Clock = time.monotonic) -> None:
        self.capacity = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self._tokens = capacity
        self._last_refill = clock()
        self._lock = threading.Lock()

    @property
    def tokens(self) -> int:
        with self._lock:
            return self._tokens

    def allow(self) -> bool:
        """Consume one token if available."""
        return self.allow_n(1)

    def allow_n(self, n: int) -> bool:
        """Consume ``n`` tokens if that many are available."""
        with self._lock:
            self._refill()
            if self._tokens >= n:
                self._tokens -= n
                return True
            return False

    def _refill(self) -> None:
        now = self._clock()
        to_add = int(now - self._last_refill) * self.refill_rate
        if to_add > 0:
            self._tokens = min(self.capacity, self._tokens + to_add)
            self._last_refill = now

    def _is_idle(self, now: float, interval: float) -> bool:
        with self._lock:
            return self._tokens == self.capacity and now - self._last_refill > interval


class RateLimiter:
    """Keeps one token bucket per key and prunes idle buckets periodically."""

    def __init__(
        self,
        capacity: int,
        refill_rate: int,
        *,
        cleanup_interval: float = 600.0,
        clock: Clock = time.monotonic,
        start_cleanup: bool = True,
    ) -> None:
        self.capacity = capacity
        self.refill_rate = refill_rate
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()
        self._last_cleanup = datetime.now(timezone.utc)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        if start_cleanup:
            self._thread = threading.Thread(target=self._cleanup_loop, daemon=True)
            self._thread.start()

    def __enter__(self) -> "RateLimiter":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def allow(self, key: str) -> bool:
        return self.allow_n(key, 1)

    def allow_n(self, key: str, n: int) -> bool:
        return self._bucket(key).allow_n(n)

    def _bucket(self, key: str) -> TokenBucket:
        bucket = self._buckets.get(key)
        if bucket is not None:
            return bucket
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket(self.capacity, self.refill_rate, clock=self._clock)
                self._buckets[key] = bucket
            return bucket

    def _cleanup_loop(self) -> None:
        while not self._stop.wait(self.cleanup_interval):
            self.cleanup()

    def cleanup(self) -> None:
        """Drop buckets that are full and have not refilled for a cleanup interval."""
        with self._lock:
            now = self._clock()
            idle = [k for k, b in self._buckets.items() if b._is_idle(now, self.cleanup_interval)]
            for key in idle:
                del self._buckets[key]
            self._last_cleanup = datetime.now(timezone.utc)

    def reset(self, key: str) -> None:
        with self._lock:
            self._buckets.pop(key, None)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "active_buckets": len(self._buckets),
                "capacity": self.capacity,
                "refill_rate": self.refill_rate,
                "last_cleanup": self._last_cleanup,
            }

    def close(self) -> None:
        """Stop the background cleanup thread."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None