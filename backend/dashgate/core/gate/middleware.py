"""
Gate middleware: the one side-effecting step around gate().

Flow: build RequestContext -> gate() -> redirect / reject, or rate limit (for
/api/ paths) -> handler -> attach headers. Static routes pass through
untouched. A fault in the gate or in the handler becomes a generic 500
(with the decision headers when one was made) instead of propagating.
"""

import logging
import time
import uuid
from http import HTTPStatus

from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from dashgate.core.config import settings
from dashgate.core.gate.config import GateConfig, get_gate_config
from dashgate.core.gate.context import RequestContext
from dashgate.core.gate.decision import GateAction, GateDecision
from dashgate.core.gate.engine import gate
from dashgate.core.gate.events import SecurityEvent, log_security_event, report_exception
from dashgate.core.gate.headers import apply_headers
from dashgate.core.gate.ratelimit import check_route_rate_limit

_log = logging.getLogger(__name__)


def gate_error(status_code: int, headers: dict[str, str] | None = None) -> JSONResponse:
    """Standard envelope { success: false, message, data: [] }; message is the status phrase only."""
    body = {"success": False, "message": HTTPStatus(status_code).phrase, "data": []}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


class GateMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        config: GateConfig | None = None,
        *,
        debug_headers: bool | None = None,
        strip_disclosure: bool | None = None,
    ) -> None:
        super().__init__(app)
        self.config = config if config is not None else get_gate_config()
        self.debug_headers = (
            settings.ENVIRONMENT == "local" if debug_headers is None else debug_headers
        )
        self.strip_disclosure = (
            settings.ENVIRONMENT == "production"
            if strip_disclosure is None
            else strip_disclosure
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        try:
            ctx = RequestContext.from_request(request, self.config)
            decision = gate(ctx, self.config)

            if not decision.is_allowed:
                return self._finish(self._denial(decision), decision, started)

            if decision.route_class is None or not decision.route_class.skips_headers:
                allowed, limiter = check_route_rate_limit(ctx.path, ctx.client_ip)
                if not allowed and limiter is not None:
                    log_security_event(
                        SecurityEvent.RATE_LIMIT_EXCEEDED,
                        ip=ctx.client_ip,
                        path=ctx.path,
                        limiter=limiter.name,
                    )
                    limited = gate_error(429)
                    limited.headers["Retry-After"] = str(int(limiter.window_sec))
                    return self._finish(limited, decision, started)
        except Exception as e:
            self._report_fault(request, e, "Gate middleware failed")
            return gate_error(500)

        # Handler faults still get the decision headers
        try:
            response = await call_next(request)
        except Exception as e:
            self._report_fault(request, e, "Handler failed behind gate")
            return self._finish(gate_error(500), decision, started)
        return self._finish(response, decision, started)

    def _denial(self, decision: GateDecision) -> Response:
        if decision.action is GateAction.REDIRECT:
            return RedirectResponse(
                decision.location or self.config.auth_entry_point,
                status_code=decision.status_code or 307,
            )
        return gate_error(decision.status_code or 500)

    @staticmethod
    def _report_fault(request: Request, exc: Exception, message: str) -> None:
        _log.exception("%s on %s %s", message, request.method, request.url.path)
        log_security_event(
            SecurityEvent.MIDDLEWARE_ERROR,
            path=request.url.path,
            method=request.method,
            error=type(exc).__name__,
        )
        report_exception(exc, path=request.url.path)

    def _finish(
        self, response: Response, decision: GateDecision, started: float
    ) -> Response:
        if decision.route_class is not None and decision.route_class.skips_headers:
            return response
        apply_headers(response, decision.headers, strip_disclosure=self.strip_disclosure)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"
        if self.debug_headers:
            response.headers["X-Security-Applied"] = "true"
            response.headers["X-Request-ID"] = str(uuid.uuid4())
            if decision.route_class is not None:
                response.headers["X-Route-Class"] = decision.route_class.value
        return response
