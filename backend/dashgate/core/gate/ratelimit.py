"""
Per-route rate limiting, applied at the middleware boundary for /api/ paths.

Each path maps to a named limiter (first matching prefix wins, default "api").
Sliding window per (limiter, client ip). Redis sorted set when available,
in-memory fallback otherwise.

Fail-open: when Redis raises, check_rate_limit returns True (allow) so that a
Redis outage does not take the dashboard down with it.
"""

import threading
import time
import uuid
from dataclasses import dataclass

import redis

from dashgate.core.config import settings
from dashgate.core.redis_client import get_redis

_REDIS_KEY_PREFIX = "ratelimit:gate:"
_memory: dict[str, list[float]] = {}
_memory_lock = threading.Lock()
_memory_last_gc: float = 0.0
_MEMORY_GC_INTERVAL = 60.0


@dataclass(frozen=True)
class Limiter:
    name: str
    limit: int
    window_sec: float


LIMITERS: dict[str, Limiter] = {
    "api": Limiter("api", 1000, 15 * 60.0),
    "login": Limiter("login", 5, 15 * 60.0),
    "password-reset": Limiter("password-reset", 3, 60 * 60.0),
    "file-upload": Limiter("file-upload", 10, 60.0),
    "reports": Limiter("reports", 20, 60.0),
    "search": Limiter("search", 60, 60.0),
}

ROUTE_LIMITERS: tuple[tuple[str, str], ...] = (
    ("/api/auth/login", "login"),
    ("/api/auth/register", "login"),
    ("/api/auth/reset-password", "password-reset"),
    ("/api/upload", "file-upload"),
    ("/api/reports", "reports"),
    ("/api/search", "search"),
)
DEFAULT_LIMITER = "api"

_MAX_WINDOW_SEC = max(lim.window_sec for lim in LIMITERS.values())


def limiter_for_path(path: str) -> Limiter | None:
    """Limiter for an /api/ path; None for anything else (pages, assets)."""
    if not path.startswith("/api/"):
        return None
    for prefix, name in ROUTE_LIMITERS:
        if path.startswith(prefix):
            return LIMITERS[name]
    return LIMITERS[DEFAULT_LIMITER]


def _get_redis() -> redis.Redis | None:
    return get_redis()


def _check_redis(key: str, limit: int, window_sec: float, r: redis.Redis) -> bool:
    k = _REDIS_KEY_PREFIX + key
    now = time.time()
    cutoff = now - window_sec
    try:
        pipe = r.pipeline(transaction=False)
        pipe.zremrangebyscore(k, "-inf", cutoff)
        pipe.zcard(k)
        results = pipe.execute()
        n = results[1]
        if n >= limit:
            return False
        pipe2 = r.pipeline(transaction=False)
        pipe2.zadd(k, {f"{now}:{uuid.uuid4().hex}": now})
        pipe2.expire(k, int(window_sec) + 1)
        pipe2.execute()
        return True
    except redis.RedisError:
        return True  # fail-open


def _gc_memory() -> None:
    """Drop keys whose newest hit is older than the longest window."""
    global _memory_last_gc
    now = time.time()
    if (now - _memory_last_gc) < _MEMORY_GC_INTERVAL:
        return
    _memory_last_gc = now
    cutoff = now - _MAX_WINDOW_SEC
    dead = [k for k, v in _memory.items() if not v or v[-1] < cutoff]
    for k in dead:
        _memory.pop(k, None)


def _check_memory(key: str, limit: int, window_sec: float) -> bool:
    now = time.time()
    cutoff = now - window_sec
    with _memory_lock:
        arr = [t for t in _memory.get(key, []) if t > cutoff]
        if len(arr) >= limit:
            _memory[key] = arr
            return False
        arr.append(now)
        _memory[key] = arr
        _gc_memory()
        return True


def check_rate_limit(
    key: str, limit: int | None = None, window_sec: float = 60.0
) -> bool:
    """
    Rate limit by key. True = allow, False = over limit (caller returns 429).

    - limit None or <= 0: always True.
    - FLOW_CONTROL_RATE_LIMIT_ENABLED False: always True (kill switch).
    - Empty key: True.
    """
    if not settings.FLOW_CONTROL_RATE_LIMIT_ENABLED:
        return True
    if limit is None or limit <= 0:
        return True
    if not key or not isinstance(key, str):
        return True
    window_sec = max(1.0, float(window_sec))
    r = _get_redis()
    if r is not None:
        return _check_redis(key, limit, window_sec, r)
    return _check_memory(key, limit, window_sec)


def check_route_rate_limit(path: str, client_ip: str) -> tuple[bool, Limiter | None]:
    """Apply the route's limiter for this client. Returns (allowed, limiter)."""
    limiter = limiter_for_path(path)
    if limiter is None:
        return True, None
    allowed = check_rate_limit(
        f"{limiter.name}:{client_ip}", limit=limiter.limit, window_sec=limiter.window_sec
    )
    return allowed, limiter
