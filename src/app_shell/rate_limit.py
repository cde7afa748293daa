import math
from datetime import datetime, timedelta
from threading import Lock

from src.adapters.clock import SystemClock
from src.ports.clock import ClockPort


class RateLimiter:
    """
    Sliding-window limiter keyed by caller (usually client IP).

    Checking and recording are separate so a request only starts a cooldown
    once it has actually been accepted.
    """

    def __init__(self, clock: ClockPort | None = None):
        self._clock = clock if clock is not None else SystemClock()
        self._history: dict[str, list[datetime]] = {}
        self._lock = Lock()

    def _cleanup(self, key: str, window: int) -> None:
        cutoff = self._clock.now_utc() - timedelta(seconds=window)
        if key in self._history:
            self._history[key] = [t for t in self._history[key] if t > cutoff]
            if not self._history[key]:
                del self._history[key]

    def check_rate_limit(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """
        Check whether another attempt is allowed.
        Returns (allowed, retry_after_seconds); retry_after is 0 when allowed.
        """
        if limit <= 0:
            return False, window_seconds

        with self._lock:
            self._cleanup(key, window_seconds)
            attempts = self._history.get(key, [])
            if len(attempts) < limit:
                return True, 0

            oldest = attempts[-limit]
            frees_at = oldest + timedelta(seconds=window_seconds)
            remaining = (frees_at - self._clock.now_utc()).total_seconds()
            return False, max(1, math.ceil(remaining))

    def record_attempt(self, key: str) -> None:
        with self._lock:
            self._history.setdefault(key, []).append(self._clock.now_utc())

    def reset(self) -> None:
        with self._lock:
            self._history.clear()
