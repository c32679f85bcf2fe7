"""
Gate decision: the tagged outcome of gate() (allow, redirect or reject) plus
the headers to attach at the boundary.
"""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode

from dashgate.core.gate.classifier import RouteClass
from dashgate.core.gate.config import GateConfig

REDIRECT_STATUS_CODE = 307


class GateAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    REJECT = "reject"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    route_class: RouteClass | None
    headers: dict[str, str] = field(default_factory=dict)
    location: str | None = None
    status_code: int | None = None
    reason: str = ""

    @classmethod
    def allow(
        cls,
        route_class: RouteClass,
        headers: dict[str, str] | None = None,
        *,
        reason: str = "allowed",
    ) -> "GateDecision":
        return cls(
            action=GateAction.ALLOW,
            route_class=route_class,
            headers=dict(headers or {}),
            reason=reason,
        )

    @classmethod
    def redirect(
        cls,
        route_class: RouteClass,
        location: str,
        headers: dict[str, str] | None = None,
        *,
        reason: str,
    ) -> "GateDecision":
        return cls(
            action=GateAction.REDIRECT,
            route_class=route_class,
            headers=dict(headers or {}),
            location=location,
            status_code=REDIRECT_STATUS_CODE,
            reason=reason,
        )

    @classmethod
    def reject(
        cls,
        route_class: RouteClass | None,
        status_code: int,
        headers: dict[str, str] | None = None,
        *,
        reason: str,
    ) -> "GateDecision":
        return cls(
            action=GateAction.REJECT,
            route_class=route_class,
            headers=dict(headers or {}),
            status_code=status_code,
            reason=reason,
        )

    @property
    def is_allowed(self) -> bool:
        return self.action is GateAction.ALLOW


def login_redirect_url(path: str, config: GateConfig) -> str:
    """Auth entry point with the original path kept as the return-to parameter."""
    entry = config.auth_entry_point.strip()
    sep = "&" if "?" in entry else "?"
    return entry + sep + urlencode({config.return_to_param: path}, safe="/")
