"""In-process sliding-window rate limiter for local development

Keeps a deque of admission timestamps per client key. Keys whose newest
timestamp has left the window are evicted on every call, so no entry
outlives the window by more than one request.

State is per process: every Lambda container (or dev server worker) counts
on its own. Use RateLimitRedisDAO when limits must hold across processes.
"""

import threading
from collections import deque
from datetime import datetime, timedelta, UTC

from beartype import beartype

from shortlink.models import RateLimitDecision
from shortlink.dao.base import RateLimitBaseDAO


class RateLimitMemoryDAO(RateLimitBaseDAO):
    backend = 'local'

    def __init__(self, limit: int, window_seconds: int | float):
        super().__init__(limit=limit, window_seconds=window_seconds)
        self._requests: dict[str, deque[datetime]] = {}
        self._lock = threading.Lock()

    @beartype
    def admit(self, client_key: str, **kwargs) -> RateLimitDecision:
        now = datetime.now(UTC)
        window = timedelta(seconds=self.window_seconds)
        cutoff = now - window

        with self._lock:
            self._evict(cutoff)
            timestamps = self._requests.setdefault(client_key, deque())

            allowed = len(timestamps) < self.limit
            if allowed:
                timestamps.append(now)

            return RateLimitDecision(
                allowed=allowed,
                limit=self.limit,
                remaining=self.limit - len(timestamps),
                reset_at=timestamps[0] + window if timestamps else now + window,
            )

    def _evict(self, cutoff: datetime) -> None:
        for client_key in list(self._requests):
            timestamps = self._requests[client_key]
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()
            if not timestamps:
                del self._requests[client_key]
