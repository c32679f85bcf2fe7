"""
Shared Redis client for the rate limiter.

One lazily created connection per process. Returns None when CACHE_ENABLED is
off or the first PING fails, and callers fall back to in-memory state.
"""

import logging
import threading

import redis

from dashgate.core.config import settings

_LOG = logging.getLogger(__name__)

_lock = threading.Lock()
_client: redis.Redis | None = None
_tried = False


def get_redis() -> redis.Redis | None:
    global _client, _tried
    if _tried:
        return _client
    with _lock:
        if _tried:
            return _client
        _tried = True
        _client = _create_client()
        return _client


def reset_redis() -> None:
    """Forget the cached client so the next get_redis() reconnects."""
    global _client, _tried
    with _lock:
        _client = None
        _tried = False


def _create_client() -> redis.Redis | None:
    if not settings.CACHE_ENABLED:
        return None
    try:
        r = redis.Redis.from_url(settings.redis_url, decode_responses=False)
        r.ping()
        return r
    except redis.RedisError as e:
        _LOG.warning("Redis unavailable at %s: %s", settings.REDIS_HOST, e)
        return None


def ping() -> bool:
    """True if Redis answers PING."""
    client = _client if _client is not None else _create_client()
    if client is None:
        return False
    try:
        return bool(client.ping())
    except redis.RedisError:
        return False
