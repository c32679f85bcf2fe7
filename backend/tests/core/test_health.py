"""Unit tests for readiness and liveness helpers."""

from unittest.mock import patch

from dashgate.core import health


def test_liveness_check() -> None:
    assert health.liveness_check() == (True, [])


def test_cache_disabled_is_ready() -> None:
    with patch("dashgate.core.health.settings") as m:
        m.CACHE_ENABLED = False
        assert health.dependency_checks() == {"cache": "disabled"}
        assert health.readiness_check() == (True, [])


def test_cache_down_is_not_ready() -> None:
    with (
        patch("dashgate.core.health.settings") as m,
        patch("dashgate.core.health.redis_ping", return_value=False),
    ):
        m.CACHE_ENABLED = True
        assert health.dependency_checks() == {"cache": "down"}
        assert health.readiness_check() == (False, ["cache"])


def test_cache_up_is_ready() -> None:
    with (
        patch("dashgate.core.health.settings") as m,
        patch("dashgate.core.health.redis_ping", return_value=True),
    ):
        m.CACHE_ENABLED = True
        assert health.readiness_check() == (True, [])


def test_uptime_is_non_negative() -> None:
    assert health.uptime_seconds() >= 0
