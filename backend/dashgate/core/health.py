"""
Health-check helpers for liveness and readiness probes.

Liveness:  is the process alive and not deadlocked? (cheap, no I/O)
Readiness: can it serve traffic? (Redis, when the rate limiter relies on it)
"""

import logging
import time

from dashgate.core.config import settings
from dashgate.core.redis_client import ping as redis_ping

logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _STARTED_AT, 3)


def check_redis() -> bool:
    """Check Redis by PING via shared client."""
    return redis_ping()


def redis_required() -> bool:
    """Whether Redis is part of readiness (only when CACHE_ENABLED)."""
    return bool(settings.CACHE_ENABLED)


def dependency_checks() -> dict[str, str]:
    """Per-dependency status: "up", "down" or "disabled"."""
    if not redis_required():
        return {"cache": "disabled"}
    return {"cache": "up" if check_redis() else "down"}


def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe, just confirms the Python process is responsive.
    Return format matches readiness_check for consistency.
    """
    return (True, [])


def readiness_check() -> tuple[bool, list[str]]:
    """Returns (ok, list of failed dependency names)."""
    failures = [name for name, state in dependency_checks().items() if state == "down"]
    if failures:
        logger.warning("Readiness check failed: %s", ", ".join(failures))
    return (len(failures) == 0, failures)
