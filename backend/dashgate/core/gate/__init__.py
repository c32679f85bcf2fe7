"""
Route gate: classify request paths and decide allow / redirect / reject.
"""

from dashgate.core.gate.classifier import RouteClass, classify, normalize_path
from dashgate.core.gate.config import (
    ClosedAction,
    FailMode,
    GateConfig,
    get_gate_config,
)
from dashgate.core.gate.context import RequestContext
from dashgate.core.gate.decision import GateAction, GateDecision, login_redirect_url
from dashgate.core.gate.engine import gate, requires_session
from dashgate.core.gate.headers import (
    BASELINE_SECURITY_HEADERS,
    apply_headers,
    build_security_headers,
)
from dashgate.core.gate.middleware import GateMiddleware
from dashgate.core.gate.patterns import (
    GateConfigError,
    RoutePattern,
    matches_any,
    parse_pattern,
    parse_patterns,
)
from dashgate.core.gate.ratelimit import check_rate_limit, check_route_rate_limit
from dashgate.core.gate.screening import ScreeningResult, screen_request

__all__ = [
    "BASELINE_SECURITY_HEADERS",
    "ClosedAction",
    "FailMode",
    "GateAction",
    "GateConfig",
    "GateConfigError",
    "GateDecision",
    "GateMiddleware",
    "RequestContext",
    "RouteClass",
    "RoutePattern",
    "ScreeningResult",
    "apply_headers",
    "build_security_headers",
    "check_rate_limit",
    "check_route_rate_limit",
    "classify",
    "gate",
    "get_gate_config",
    "login_redirect_url",
    "matches_any",
    "normalize_path",
    "parse_pattern",
    "parse_patterns",
    "requires_session",
    "screen_request",
]
