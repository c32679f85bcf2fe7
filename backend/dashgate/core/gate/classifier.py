"""
Route classifier: map a request path to its policy class.

Precedence is fixed: static, public, auth, protected, else unclassified.
First match wins. No caching and no side effects; the pattern lists are
small, so a linear scan per request is fine.
"""

from enum import Enum
from typing import TYPE_CHECKING

from dashgate.core.gate.patterns import matches_any

if TYPE_CHECKING:
    from dashgate.core.gate.config import GateConfig


class RouteClass(str, Enum):
    """Policy class of a request path."""

    PUBLIC = "public"
    AUTH = "auth"
    STATIC = "static"
    PROTECTED = "protected"
    UNCLASSIFIED = "unclassified"

    @property
    def skips_headers(self) -> bool:
        return self is RouteClass.STATIC

    @property
    def requires_session(self) -> bool:
        return self is RouteClass.PROTECTED


def normalize_path(raw: str | None) -> str:
    """Drop query string and fragment; empty becomes "/"; always rooted."""
    path = (raw or "").split("#", 1)[0].split("?", 1)[0].strip()
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    return path


def classify(path: str, config: "GateConfig") -> RouteClass:
    if matches_any(path, config.static_routes):
        return RouteClass.STATIC
    if matches_any(path, config.public_routes):
        return RouteClass.PUBLIC
    if matches_any(path, config.auth_routes):
        return RouteClass.AUTH
    if matches_any(path, config.protected_routes):
        return RouteClass.PROTECTED
    return RouteClass.UNCLASSIFIED
