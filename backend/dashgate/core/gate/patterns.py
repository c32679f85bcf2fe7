"""
Route patterns: parse configured route strings and match request paths.

Pattern forms:
- "/admin*"     prefix match on "/admin" ("/adminpanel", "/admin/x")
- "/api/"       prefix match on "/api/"
- "/dashboard"  the path itself or any sub-path ("/dashboard/today"), not "/dashboard2"
"""

from collections.abc import Iterable
from dataclasses import dataclass

WILDCARD = "*"
SEPARATOR = "/"


class GateConfigError(ValueError):
    """Malformed gate configuration. Raised at startup, never per request."""


@dataclass(frozen=True)
class RoutePattern:
    raw: str
    prefix: str
    is_wildcard: bool

    def matches(self, path: str) -> bool:
        if self.is_wildcard:
            return path.startswith(self.prefix)
        return path == self.prefix or path.startswith(self.prefix + SEPARATOR)


def parse_pattern(raw: str) -> RoutePattern:
    """
    Parse one configured route string into a RoutePattern.

    Raises GateConfigError for non-strings, empty strings, patterns not rooted
    at "/" (a bare "*" included) and a wildcard marker anywhere but the end.
    """
    if not isinstance(raw, str):
        raise GateConfigError(
            f"Route pattern must be a string, got {type(raw).__name__}"
        )
    value = raw.strip()
    if not value:
        raise GateConfigError("Route pattern must not be empty")
    if not value.startswith(SEPARATOR):
        raise GateConfigError(f"Route pattern must start with '/': {raw!r}")

    if value.endswith(WILDCARD):
        prefix = value[:-1]
        if WILDCARD in prefix:
            raise GateConfigError(
                f"Wildcard is only supported at the end of a pattern: {raw!r}"
            )
        return RoutePattern(raw=value, prefix=prefix, is_wildcard=True)
    if WILDCARD in value:
        raise GateConfigError(
            f"Wildcard is only supported at the end of a pattern: {raw!r}"
        )
    if value.endswith(SEPARATOR):
        return RoutePattern(raw=value, prefix=value, is_wildcard=True)
    return RoutePattern(raw=value, prefix=value, is_wildcard=False)


def parse_patterns(raws: Iterable[str]) -> tuple[RoutePattern, ...]:
    if isinstance(raws, str):
        raise GateConfigError(
            f"Route patterns must be a list of strings, got a string: {raws!r}"
        )
    return tuple(parse_pattern(r) for r in raws)


def matches_any(path: str, patterns: Iterable[RoutePattern]) -> bool:
    return any(p.matches(path) for p in patterns)
