import threading
import time
from collections import deque
from typing import Deque, Dict


class RateLimiter:
    """Sliding one-minute window per client."""

    def __init__(self, max_per_minute: int = 60, window_seconds: int = 60):
        self.max = max_per_minute
        self.window = window_seconds
        self.buckets: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        now = time.time()
        with self._lock:
            bucket = self.buckets.setdefault(key, deque())
            while bucket and now - bucket[0] > self.window:
                bucket.popleft()
            if len(bucket) >= self.max:
                return False
            bucket.append(now)
            return True

    def remaining(self, key: str) -> int:
        with self._lock:
            bucket = self.buckets.get(key)
            return self.max - len(bucket) if bucket else self.max
