import time

import pytest

from jobboard.config import settings
from jobboard.core.rate_limiter import FixedWindowRateLimiter, limit_for


def test_rate_limiter_allows_then_blocks_then_recovers():
    limiter = FixedWindowRateLimiter()
    key = "ip:/auth/login"

    ok1, retry1 = limiter.allow(key, limit=2, window_seconds=1)
    ok2, retry2 = limiter.allow(key, limit=2, window_seconds=1)
    ok3, retry3 = limiter.allow(key, limit=2, window_seconds=1)

    assert ok1 is True and retry1 == 0
    assert ok2 is True and retry2 == 0
    assert ok3 is False
    assert retry3 >= 1

    time.sleep(1.05)
    ok4, retry4 = limiter.allow(key, limit=2, window_seconds=1)
    assert ok4 is True
    assert retry4 == 0


def test_rate_limiter_keys_are_independent_and_resettable():
    limiter = FixedWindowRateLimiter()
    assert limiter.allow("a", limit=1, window_seconds=60)[0] is True
    assert limiter.allow("a", limit=1, window_seconds=60)[0] is False
    assert limiter.allow("b", limit=1, window_seconds=60)[0] is True
    limiter.reset()
    assert limiter.allow("a", limit=1, window_seconds=60)[0] is True


@pytest.mark.parametrize(
    "method,path,expected",
    [
        ("POST", "/auth/login", "auth"),
        ("POST", "/auth/register", "auth"),
        ("GET", "/auth/me", None),
        ("POST", "/applications/job/j1", "apply"),
        ("GET", "/applications/job/j1", None),
        ("PUT", "/applications/a1/status", None),
        ("POST", "/jobs", None),
    ],
)
def test_limit_for(method, path, expected):
    limits = {"auth": settings.rate_limit_auth_per_min, "apply": settings.rate_limit_apply_per_min, None: None}
    assert limit_for(method, path) == limits[expected]
