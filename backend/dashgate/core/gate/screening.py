"""
Request screening: flag suspicious paths, user agents and query values.

Only path traversal and scanner user agents block a request (403); other
threats are reported so the gate can log them.
"""

import re
from dataclasses import dataclass

from dashgate.core.gate.context import RequestContext

_SUSPICIOUS_USER_AGENTS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"sqlmap",
        r"nmap",
        r"nikto",
        r"wget",
        r"curl.*bot",
        r"python-requests",
        r"scanner",
    )
)

_PATH_TRAVERSAL_MARKERS = ("../", "..\\", "%2e%2e")
_SUSPICIOUS_EXTENSIONS = (".php", ".asp", ".jsp", ".cgi", ".pl")

_SQL_INJECTION_PATTERNS = (
    re.compile(
        r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(UNION|OR|AND)\b.*\b(SELECT|INSERT|UPDATE|DELETE)\b", re.IGNORECASE
    ),
    re.compile(r"('|\"|;|--|\*|/\*|\*/)"),
)
_XSS_PATTERNS = (
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL),
)
_VALUE_TRAVERSAL_PATTERNS = (
    re.compile(r"\.\."),
    re.compile(r"\.\\\."),
    re.compile(r"\./"),
    re.compile(r"~/"),
    re.compile(r"%2e%2e", re.IGNORECASE),
    re.compile(r"%2f", re.IGNORECASE),
    re.compile(r"%5c", re.IGNORECASE),
)

BLOCKING_THREATS = frozenset({"path_traversal", "suspicious_user_agent"})


@dataclass(frozen=True)
class ScreeningResult:
    threats: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.threats

    @property
    def is_blocking(self) -> bool:
        return any(t in BLOCKING_THREATS for t in self.threats)


def value_threats(value: str) -> list[str]:
    """Threat names found in a single untrusted value (e.g. a query param)."""
    threats: list[str] = []
    if any(p.search(value) for p in _SQL_INJECTION_PATTERNS):
        threats.append("sql_injection")
    if any(p.search(value) for p in _XSS_PATTERNS):
        threats.append("xss")
    if any(p.search(value) for p in _VALUE_TRAVERSAL_PATTERNS):
        threats.append("path_traversal")
    return threats


def screen_request(ctx: RequestContext) -> ScreeningResult:
    threats: list[str] = []

    if ctx.user_agent and any(p.search(ctx.user_agent) for p in _SUSPICIOUS_USER_AGENTS):
        threats.append("suspicious_user_agent")

    for _key, value in ctx.query:
        for t in value_threats(value):
            name = f"query_{t}"
            if name not in threats:
                threats.append(name)

    path_lower = ctx.path.lower()
    if any(marker in path_lower for marker in _PATH_TRAVERSAL_MARKERS):
        threats.append("path_traversal")

    if any(ext in path_lower for ext in _SUSPICIOUS_EXTENSIONS):
        threats.append("suspicious_file_extension")

    return ScreeningResult(threats=tuple(threats))
