from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from dashgate.core.config import settings
from dashgate.core.gate import get_gate_config
from dashgate.core.health import (
    dependency_checks,
    liveness_check,
    readiness_check,
    uptime_seconds,
)

router = APIRouter(tags=["health"])

_NO_CACHE = {"Cache-Control": "no-cache, no-store, must-revalidate"}


@router.get("/health", response_model=None)
async def health() -> JSONResponse:
    """
    Readiness probe: can the service handle traffic?

    200 with status "healthy" when every required dependency is up, 503 with
    status "unhealthy" otherwise.
    """
    ok, failures = readiness_check()
    body: dict[str, Any] = {
        "status": "healthy" if ok else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": uptime_seconds(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "checks": dependency_checks(),
        "failures": failures,
    }
    return JSONResponse(
        status_code=200 if ok else 503,
        content=body,
        headers={**_NO_CACHE, "X-Health-Check": "true"},
    )


@router.head("/health", response_model=None)
async def health_head() -> Response:
    ok, _ = readiness_check()
    return Response(
        status_code=200 if ok else 503,
        headers={**_NO_CACHE, "X-Health-Status": "healthy" if ok else "unhealthy"},
    )


@router.get("/health/live", response_model=None)
async def liveness() -> bool | JSONResponse:
    """
    Liveness probe: is the process alive and responsive?

    Lightweight: no Redis I/O.
    """
    ok, failures = liveness_check()
    if not ok:
        return JSONResponse(
            status_code=503,
            content={"success": False, "message": "Process unhealthy", "data": failures},
        )
    return True


@router.get("/status")
async def status() -> dict[str, Any]:
    """Service identity and the active gate policy."""
    config = get_gate_config()
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "gate": {
            "fail_mode": config.fail_mode.value,
            "closed_action": config.closed_action.value,
            "auth_entry_point": config.auth_entry_point,
        },
    }
