import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.middleware.cors import CORSMiddleware

from dashgate.api.main import api_router
from dashgate.core.config import settings
from dashgate.core.gate import GateMiddleware, get_gate_config
from dashgate.core.gate.middleware import gate_error

_logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        environment=settings.ENVIRONMENT,
        release=f"dashgate@{settings.VERSION}",
        enable_tracing=True,
    )

# Malformed gate settings raise GateConfigError here, before serving anything
gate_config = get_gate_config()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    _logger.info(
        "Gate active: fail_mode=%s closed_action=%s entry=%s (%d public, %d auth, "
        "%d static, %d protected patterns)",
        gate_config.fail_mode.value,
        gate_config.closed_action.value,
        gate_config.auth_entry_point,
        len(gate_config.public_routes),
        len(gate_config.auth_routes),
        len(gate_config.static_routes),
        len(gate_config.protected_routes),
    )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Exception handlers: same { success, message, data } envelope as the gate
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """422 with one readable line per invalid field."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part != "body")
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "; ".join(messages), "data": []},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    if settings.ENVIRONMENT == "local":
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": f"Internal Server Error: {exc}", "data": []},
        )
    return gate_error(500)


# Gate first so CORS (added after, hence outermost) answers preflights
app.add_middleware(GateMiddleware, config=gate_config)

if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix="/api")
