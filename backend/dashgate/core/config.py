from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_list(v: Any) -> list[str] | str:
    """Lists come from env as "a,b" or as a JSON array."""
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "Restaurant Dashboard Gate"
    VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: HttpUrl | None = None

    FRONTEND_HOST: str = "http://localhost:3000"
    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_list)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Route gate: "closed" unless fail-open is asked for explicitly
    GATE_FAIL_MODE: Literal["open", "closed", "open-all"] = "closed"
    GATE_CLOSED_ACTION: Literal["redirect", "reject"] = "redirect"
    GATE_AUTH_ENTRY_POINT: str = "/auth/login"
    GATE_RETURN_TO_PARAM: str = "returnTo"
    GATE_SESSION_COOKIE: str = "restaurant-dashboard-session"
    GATE_PUBLIC_ROUTES: Annotated[list[str] | str, BeforeValidator(parse_list)] = [
        "/api/health",
        "/api/status",
        "/api/docs",
        "/api/redoc",
        "/api/openapi.json",
    ]
    GATE_AUTH_ROUTES: Annotated[list[str] | str, BeforeValidator(parse_list)] = [
        "/api/auth",
        "/auth",
        "/login",
        "/register",
    ]
    GATE_STATIC_ROUTES: Annotated[list[str] | str, BeforeValidator(parse_list)] = [
        "/_next",
        "/favicon.ico",
        "/robots.txt",
        "/sitemap.xml",
    ]
    GATE_PROTECTED_ROUTES: Annotated[
        list[str] | str, BeforeValidator(parse_list)
    ] = [
        "/dashboard",
        "/admin",
        "/settings",
        "/reports",
        "/orders",
    ]
    GATE_ADMIN_ROUTES: Annotated[list[str] | str, BeforeValidator(parse_list)] = [
        "/admin",
    ]
    GATE_ADMIN_ROLE: str = "admin"
    GATE_ROLE_HEADER: str = "x-user-role"
    GATE_SCREENING_ENABLED: bool = True
    GATE_EXTRA_HEADERS: dict[str, str] = {}
    # Only behind a proxy that overwrites X-Forwarded-For; otherwise clients can spoof it
    GATE_TRUST_FORWARDED_FOR: bool = False

    # Redis backs the rate limiter; in-memory fallback when disabled or down
    CACHE_ENABLED: bool = False
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def redis_url(self) -> str:
        auth = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # Kill switch for per-route rate limiting
    FLOW_CONTROL_RATE_LIMIT_ENABLED: bool = True


settings = Settings()  # type: ignore
