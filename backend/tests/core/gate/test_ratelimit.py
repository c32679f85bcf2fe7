"""Unit tests for gate rate limiting: check_rate_limit, check_route_rate_limit."""

from unittest.mock import MagicMock, patch

import redis

from dashgate.core.gate import ratelimit
from dashgate.core.gate.ratelimit import (
    LIMITERS,
    check_rate_limit,
    check_route_rate_limit,
    limiter_for_path,
)


def test_rate_limit_disabled() -> None:
    """When FLOW_CONTROL_RATE_LIMIT_ENABLED is False, all requests are allowed (kill switch)."""
    with patch("dashgate.core.gate.ratelimit.settings") as m:
        m.FLOW_CONTROL_RATE_LIMIT_ENABLED = False
        for _ in range(100):
            assert check_rate_limit("rl_disabled", limit=1) is True


def test_rate_limit_no_limit_allowed() -> None:
    for _ in range(100):
        assert check_rate_limit("rl_no_limit", limit=None) is True
        assert check_rate_limit("rl_zero", limit=0) is True


def test_rate_limit_over_limit() -> None:
    """Over the limit (61st when limit is 60), check_rate_limit returns False."""
    for _ in range(60):
        assert check_rate_limit("rl_over", limit=60) is True
    assert check_rate_limit("rl_over", limit=60) is False
    assert check_rate_limit("rl_over", limit=60) is False


def test_rate_limit_empty_key_allowed() -> None:
    assert check_rate_limit("", limit=1) is True
    assert check_rate_limit("", limit=1) is True


def test_rate_limit_per_key() -> None:
    """Limits are per key; one key over limit does not affect another."""
    assert check_rate_limit("rl_a", limit=2) is True
    assert check_rate_limit("rl_a", limit=2) is True
    assert check_rate_limit("rl_a", limit=2) is False
    assert check_rate_limit("rl_b", limit=2) is True
    assert check_rate_limit("rl_b", limit=2) is True
    assert check_rate_limit("rl_b", limit=2) is False


def test_rate_limit_window_expiry() -> None:
    """Hits older than the window no longer count."""
    with patch("dashgate.core.gate.ratelimit.time.time", return_value=1000.0):
        assert check_rate_limit("rl_window", limit=1, window_sec=10) is True
        assert check_rate_limit("rl_window", limit=1, window_sec=10) is False
    with patch("dashgate.core.gate.ratelimit.time.time", return_value=1011.0):
        assert check_rate_limit("rl_window", limit=1, window_sec=10) is True


def test_redis_error_fails_open() -> None:
    r = MagicMock()
    r.pipeline.return_value.execute.side_effect = redis.ConnectionError("down")
    with patch.object(ratelimit, "_get_redis", return_value=r):
        for _ in range(5):
            assert check_rate_limit("rl_redis_down", limit=1) is True


def test_redis_over_limit() -> None:
    r = MagicMock()
    r.pipeline.return_value.execute.return_value = [0, 3]
    with patch.object(ratelimit, "_get_redis", return_value=r):
        assert check_rate_limit("rl_redis", limit=3) is False
    r.pipeline.return_value.zremrangebyscore.assert_called()


def test_limiter_for_path() -> None:
    assert limiter_for_path("/dashboard") is None
    assert limiter_for_path("/_next/static/a.js") is None
    assert limiter_for_path("/api/health") is LIMITERS["api"]
    assert limiter_for_path("/api/auth/login") is LIMITERS["login"]
    assert limiter_for_path("/api/auth/reset-password") is LIMITERS["password-reset"]
    assert limiter_for_path("/api/reports/daily") is LIMITERS["reports"]
    assert limiter_for_path("/api/search") is LIMITERS["search"]


def test_route_rate_limit_login() -> None:
    """Login allows 5 attempts per client per window; the 6th is limited."""
    for _ in range(5):
        allowed, limiter = check_route_rate_limit("/api/auth/login", "198.51.100.1")
        assert allowed is True
    allowed, limiter = check_route_rate_limit("/api/auth/login", "198.51.100.1")
    assert allowed is False
    assert limiter is LIMITERS["login"]
    # Other clients and other limiters are unaffected
    assert check_route_rate_limit("/api/auth/login", "198.51.100.2")[0] is True
    assert check_route_rate_limit("/api/health", "198.51.100.1")[0] is True


def test_route_rate_limit_skips_pages() -> None:
    assert check_route_rate_limit("/dashboard", "198.51.100.1") == (True, None)


def test_redis_members_unique_within_same_instant() -> None:
    """Two hits at the same timestamp are two sorted-set entries."""
    r = MagicMock()
    r.pipeline.return_value.execute.return_value = [0, 0]
    with (
        patch.object(ratelimit, "_get_redis", return_value=r),
        patch("dashgate.core.gate.ratelimit.time.time", return_value=1000.0),
    ):
        assert check_rate_limit("rl_same_instant", limit=5) is True
        assert check_rate_limit("rl_same_instant", limit=5) is True
    calls = r.pipeline.return_value.zadd.call_args_list
    assert len(calls) == 2
    members = [next(iter(c.args[1])) for c in calls]
    assert members[0] != members[1]
    assert all(m.startswith("1000.0:") for m in members)
