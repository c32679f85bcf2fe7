from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
import redis

from dashgate.core import redis_client


@pytest.fixture(autouse=True)
def _fresh_client() -> Generator[None, None, None]:
    redis_client.reset_redis()
    yield
    redis_client.reset_redis()


def test_disabled_returns_none() -> None:
    with patch("dashgate.core.redis_client.settings") as m:
        m.CACHE_ENABLED = False
        assert redis_client.get_redis() is None
        assert redis_client.ping() is False


def test_unreachable_returns_none_once() -> None:
    with (
        patch("dashgate.core.redis_client.settings") as m,
        patch("dashgate.core.redis_client.redis.Redis.from_url") as from_url,
    ):
        m.CACHE_ENABLED = True
        m.redis_url = "redis://localhost:6379/0"
        from_url.return_value.ping.side_effect = redis.ConnectionError("refused")
        assert redis_client.get_redis() is None
        assert redis_client.get_redis() is None
        from_url.assert_called_once()


def test_client_is_shared() -> None:
    fake = MagicMock()
    with (
        patch("dashgate.core.redis_client.settings") as m,
        patch("dashgate.core.redis_client.redis.Redis.from_url", return_value=fake),
    ):
        m.CACHE_ENABLED = True
        assert redis_client.get_redis() is fake
        assert redis_client.get_redis() is fake
        assert redis_client.ping() is True
