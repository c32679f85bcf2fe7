"""
Security event logging for gate decisions.

Events go to the "dashgate.security" logger as one JSON payload per line.
Denials and faults log at WARNING, everything else at INFO.
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import sentry_sdk

_security_log = logging.getLogger("dashgate.security")


class SecurityEvent(str, Enum):
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    AUTH_REQUIRED = "auth_required"
    AUTH_BYPASSED = "auth_bypassed"
    ADMIN_ACCESS_ATTEMPT = "admin_access_attempt"
    MIDDLEWARE_ERROR = "middleware_error"


_WARNING_EVENTS = frozenset(
    {
        SecurityEvent.SUSPICIOUS_ACTIVITY,
        SecurityEvent.PERMISSION_DENIED,
        SecurityEvent.RATE_LIMIT_EXCEEDED,
        SecurityEvent.AUTH_REQUIRED,
        SecurityEvent.MIDDLEWARE_ERROR,
    }
)


def log_security_event(event: SecurityEvent, **details: Any) -> dict[str, Any]:
    """Log one security event; returns the payload that was logged."""
    payload: dict[str, Any] = {
        "event": event.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **details,
    }
    level = logging.WARNING if event in _WARNING_EVENTS else logging.INFO
    _security_log.log(
        level,
        "Security event %s: %s",
        event.value,
        json.dumps(payload, default=str),
        extra={"security_event": payload},
    )
    return payload


def report_exception(exc: BaseException, **details: Any) -> None:
    """Forward a gate fault to Sentry; a no-op when Sentry is not initialised."""
    with sentry_sdk.new_scope() as scope:
        for key, value in details.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)
