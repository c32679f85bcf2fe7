"""
Per-request facts the gate decides on.

Only the presence of the session cookie is recorded; its contents are never
read or validated here.
"""

from dataclasses import dataclass

from starlette.requests import Request

from dashgate.core.gate.classifier import normalize_path
from dashgate.core.gate.config import GateConfig


def get_client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    """
    Client IP: request.client.host, or the rightmost X-Forwarded-For entry when
    the service runs behind a proxy that sets it (trust_forwarded_for).
    """
    if trust_forwarded_for:
        xff = request.headers.get("x-forwarded-for")
        if xff:
            return xff.split(",")[-1].strip()
    return getattr(getattr(request, "client", None), "host", None) or "unknown"


@dataclass(frozen=True)
class RequestContext:
    path: str
    has_session_token: bool = False
    method: str = "GET"
    user_agent: str = ""
    query: tuple[tuple[str, str], ...] = ()
    user_role: str | None = None
    client_ip: str = "unknown"

    @classmethod
    def from_request(cls, request: Request, config: GateConfig) -> "RequestContext":
        return cls(
            path=normalize_path(request.url.path),
            has_session_token=config.session_cookie in request.cookies,
            method=request.method.upper(),
            user_agent=request.headers.get("user-agent", ""),
            query=tuple(request.query_params.multi_items()),
            user_role=request.headers.get(config.role_header),
            client_ip=get_client_ip(request, config.trust_forwarded_for),
        )
