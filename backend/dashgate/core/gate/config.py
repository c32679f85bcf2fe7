"""
Gate configuration: the four ordered route lists plus the access policy.

Built once at startup (GateConfig.from_settings / get_gate_config) and passed
explicitly into classify() and gate(). Immutable after construction; every
malformed value raises GateConfigError here instead of failing per request.
"""

import functools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from dashgate.core.config import Settings, settings
from dashgate.core.gate.headers import PRODUCTION_SECURITY_HEADERS
from dashgate.core.gate.patterns import (
    GateConfigError,
    RoutePattern,
    matches_any,
    parse_patterns,
)


class FailMode(str, Enum):
    """
    What happens when a request lacks a session on a route that needs one.

    OPEN      allow and log (development posture).
    CLOSED    redirect to the auth entry point or reject with 401; unclassified
              routes need a session too.
    OPEN_ALL  allow everything; no screening, no session or role checks.
    """

    OPEN = "open"
    CLOSED = "closed"
    OPEN_ALL = "open-all"


class ClosedAction(str, Enum):
    """Response for a missing session under FailMode.CLOSED."""

    REDIRECT = "redirect"
    REJECT = "reject"


_E = TypeVar("_E", bound=Enum)


def _coerce_enum(enum_cls: type[_E], value: Any, label: str) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)  # type: ignore[attr-defined]
        raise GateConfigError(
            f"Invalid {label} {value!r}; expected one of {allowed}"
        ) from None


@dataclass(frozen=True)
class GateConfig:
    public_routes: tuple[RoutePattern, ...] = ()
    auth_routes: tuple[RoutePattern, ...] = ()
    static_routes: tuple[RoutePattern, ...] = ()
    protected_routes: tuple[RoutePattern, ...] = ()
    admin_routes: tuple[RoutePattern, ...] = ()
    fail_mode: FailMode = FailMode.CLOSED
    closed_action: ClosedAction = ClosedAction.REDIRECT
    auth_entry_point: str = "/auth/login"
    return_to_param: str = "returnTo"
    session_cookie: str = "restaurant-dashboard-session"
    admin_role: str = "admin"
    role_header: str = "x-user-role"
    extra_headers: tuple[tuple[str, str], ...] = ()
    screening_enabled: bool = True
    trust_forwarded_for: bool = False

    def __post_init__(self) -> None:
        if not self.session_cookie or not self.session_cookie.strip():
            raise GateConfigError("Session cookie name must not be empty")
        if not self.return_to_param or not self.return_to_param.strip():
            raise GateConfigError("Return-to query parameter must not be empty")
        if not self.role_header or not self.role_header.strip():
            raise GateConfigError("Role header name must not be empty")
        entry = (self.auth_entry_point or "").strip()
        if not entry.startswith("/"):
            raise GateConfigError(
                f"Auth entry point must be a path starting with '/': {self.auth_entry_point!r}"
            )
        if (
            self.fail_mode is FailMode.CLOSED
            and self.closed_action is ClosedAction.REDIRECT
        ):
            entry_path = entry.split("?", 1)[0]
            reachable = (
                matches_any(entry_path, self.static_routes)
                or matches_any(entry_path, self.public_routes)
                or matches_any(entry_path, self.auth_routes)
            )
            if not reachable:
                raise GateConfigError(
                    f"Auth entry point {entry_path!r} must match a public, auth or "
                    "static route, otherwise the redirect would loop"
                )

    @classmethod
    def from_lists(
        cls,
        *,
        public_routes: Iterable[str] = (),
        auth_routes: Iterable[str] = (),
        static_routes: Iterable[str] = (),
        protected_routes: Iterable[str] = (),
        admin_routes: Iterable[str] = (),
        fail_mode: FailMode | str = FailMode.CLOSED,
        closed_action: ClosedAction | str = ClosedAction.REDIRECT,
        extra_headers: Mapping[str, str] | None = None,
        **options: Any,
    ) -> "GateConfig":
        """Build from raw route strings, as they appear in settings."""
        return cls(
            public_routes=parse_patterns(public_routes),
            auth_routes=parse_patterns(auth_routes),
            static_routes=parse_patterns(static_routes),
            protected_routes=parse_patterns(protected_routes),
            admin_routes=parse_patterns(admin_routes),
            fail_mode=_coerce_enum(FailMode, fail_mode, "fail mode"),
            closed_action=_coerce_enum(ClosedAction, closed_action, "closed action"),
            extra_headers=tuple((extra_headers or {}).items()),
            **options,
        )

    @classmethod
    def from_settings(cls, s: Settings) -> "GateConfig":
        extra = dict(s.GATE_EXTRA_HEADERS)
        if s.ENVIRONMENT == "production":
            for name, value in PRODUCTION_SECURITY_HEADERS:
                extra.setdefault(name, value)
        return cls.from_lists(
            public_routes=s.GATE_PUBLIC_ROUTES,
            auth_routes=s.GATE_AUTH_ROUTES,
            static_routes=s.GATE_STATIC_ROUTES,
            protected_routes=s.GATE_PROTECTED_ROUTES,
            admin_routes=s.GATE_ADMIN_ROUTES,
            fail_mode=s.GATE_FAIL_MODE,
            closed_action=s.GATE_CLOSED_ACTION,
            extra_headers=extra,
            auth_entry_point=s.GATE_AUTH_ENTRY_POINT,
            return_to_param=s.GATE_RETURN_TO_PARAM,
            session_cookie=s.GATE_SESSION_COOKIE,
            admin_role=s.GATE_ADMIN_ROLE,
            role_header=s.GATE_ROLE_HEADER,
            screening_enabled=s.GATE_SCREENING_ENABLED,
            trust_forwarded_for=s.GATE_TRUST_FORWARDED_FOR,
        )


@functools.lru_cache(maxsize=1)
def get_gate_config() -> GateConfig:
    """Process-wide gate config built from settings on first use."""
    return GateConfig.from_settings(settings)
