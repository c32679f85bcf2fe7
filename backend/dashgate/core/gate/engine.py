"""
Access gate: classify a request, then allow, redirect or reject it.

Flow: classify -> static bypass -> headers -> screening -> session -> admin role.
gate() is synchronous and does no I/O besides logging. It never raises: an
internal fault becomes a 500 rejection with no headers and no detail.
"""

import logging

from dashgate.core.gate.classifier import RouteClass, classify
from dashgate.core.gate.config import ClosedAction, FailMode, GateConfig
from dashgate.core.gate.context import RequestContext
from dashgate.core.gate.decision import GateDecision, login_redirect_url
from dashgate.core.gate.events import (
    SecurityEvent,
    log_security_event,
    report_exception,
)
from dashgate.core.gate.headers import build_security_headers
from dashgate.core.gate.patterns import matches_any
from dashgate.core.gate.screening import screen_request

_log = logging.getLogger(__name__)


def requires_session(route_class: RouteClass, config: GateConfig) -> bool:
    """Protected routes always; unclassified routes only when failing closed."""
    if route_class.requires_session:
        return True
    return route_class is RouteClass.UNCLASSIFIED and config.fail_mode is FailMode.CLOSED


def gate(ctx: RequestContext, config: GateConfig) -> GateDecision:
    try:
        return _evaluate(ctx, config)
    except Exception as e:
        path = getattr(ctx, "path", None)
        _log.exception("Gate evaluation failed for path %r", path)
        log_security_event(
            SecurityEvent.MIDDLEWARE_ERROR,
            path=path,
            error=type(e).__name__,
        )
        report_exception(e, path=path)
        return GateDecision.reject(None, 500, reason="internal_error")


def _evaluate(ctx: RequestContext, config: GateConfig) -> GateDecision:
    route_class = classify(ctx.path, config)
    if route_class.skips_headers:
        return GateDecision.allow(route_class, reason="static_bypass")

    headers = build_security_headers(config.extra_headers)

    if config.fail_mode is FailMode.OPEN_ALL:
        return GateDecision.allow(route_class, headers, reason="open_all")

    if config.screening_enabled:
        screening = screen_request(ctx)
        if not screening.is_valid:
            log_security_event(
                SecurityEvent.SUSPICIOUS_ACTIVITY,
                ip=ctx.client_ip,
                path=ctx.path,
                method=ctx.method,
                user_agent=ctx.user_agent,
                threats=list(screening.threats),
            )
            if screening.is_blocking:
                return GateDecision.reject(
                    route_class, 403, headers, reason="suspicious_request"
                )

    if not ctx.has_session_token and requires_session(route_class, config):
        if config.fail_mode is FailMode.OPEN:
            log_security_event(
                SecurityEvent.AUTH_BYPASSED,
                ip=ctx.client_ip,
                path=ctx.path,
                route_class=route_class.value,
            )
        else:
            log_security_event(
                SecurityEvent.AUTH_REQUIRED,
                ip=ctx.client_ip,
                path=ctx.path,
                route_class=route_class.value,
                action=config.closed_action.value,
            )
            if config.closed_action is ClosedAction.REJECT:
                return GateDecision.reject(
                    route_class, 401, headers, reason="session_required"
                )
            return GateDecision.redirect(
                route_class,
                login_redirect_url(ctx.path, config),
                headers,
                reason="session_required",
            )

    if matches_any(ctx.path, config.admin_routes) and ctx.user_role != config.admin_role:
        if config.fail_mode is FailMode.OPEN:
            log_security_event(
                SecurityEvent.ADMIN_ACCESS_ATTEMPT,
                ip=ctx.client_ip,
                path=ctx.path,
                user_role=ctx.user_role,
                user_agent=ctx.user_agent,
            )
        else:
            log_security_event(
                SecurityEvent.PERMISSION_DENIED,
                ip=ctx.client_ip,
                path=ctx.path,
                user_role=ctx.user_role,
                required_role=config.admin_role,
            )
            return GateDecision.reject(route_class, 403, headers, reason="admin_required")

    return GateDecision.allow(route_class, headers)
