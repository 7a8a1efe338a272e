"""In-process expiring counters

Counters live in a dict guarded by a lock, so increments from concurrent
request threads are serialized. Only suitable for a single service instance
(local runs and tests): separate processes don't share counters.
"""

import time
import threading
from collections.abc import Callable

from safeshortener.dao.base import CounterBaseDAO


class CounterMemoryDAO(CounterBaseDAO):
    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._lock = threading.Lock()
        self._counters: dict[str, tuple[int, float]] = {}  # key -> (count, expires_at)

    def increment_and_get(self, key: str, ttl: int, **kwargs) -> int:
        with self._lock:
            now = self.clock()
            count, expires_at = self._counters.get(key, (0, now + ttl))
            if expires_at <= now:
                count, expires_at = 0, now + ttl
            count += 1
            self._counters[key] = (count, expires_at)
            return count

    def clear(self, key: str, **kwargs) -> None:
        with self._lock:
            self._counters.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._counters.clear()
