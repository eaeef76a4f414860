import re
import threading
import time

from jobboard.config import settings

_APPLY_PATH = re.compile(r"^/applications/job/[^/]+$")


class FixedWindowRateLimiter:
    """
    In-memory fixed-window rate limiter keyed by client + route.
    State is per process; a multi-instance deployment needs a shared store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: dict[str, tuple[int, float]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """
        Returns (allowed, retry_after_seconds).
        """
        now = time.time()
        with self._lock:
            count, window_start = self._state.get(key, (0, now))
            if now - window_start >= window_seconds:
                count = 0
                window_start = now
            if count >= limit:
                retry_after = max(1, int(window_seconds - (now - window_start)))
                return False, retry_after
            self._state[key] = (count + 1, window_start)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._state.clear()


def limit_for(method: str, path: str) -> int | None:
    """Per-minute request limit for a route, or None when the route is not limited."""
    if method == "POST" and path in {"/auth/login", "/auth/register"}:
        return settings.rate_limit_auth_per_min
    if method == "POST" and _APPLY_PATH.match(path):
        return settings.rate_limit_apply_per_min
    return None


rate_limiter = FixedWindowRateLimiter()
