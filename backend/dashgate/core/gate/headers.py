"""
Security headers attached to every gated (non-static) response.
"""

from collections.abc import Iterable, Mapping

from starlette.responses import Response

BASELINE_SECURITY_HEADERS: tuple[tuple[str, str], ...] = (
    ("X-Content-Type-Options", "nosniff"),
    ("X-Frame-Options", "DENY"),
    ("X-XSS-Protection", "1; mode=block"),
    ("Referrer-Policy", "strict-origin-when-cross-origin"),
)

# Added on top of the baseline when ENVIRONMENT=production
PRODUCTION_SECURITY_HEADERS: tuple[tuple[str, str], ...] = (
    ("Strict-Transport-Security", "max-age=31536000; includeSubDomains; preload"),
    ("Permissions-Policy", "geolocation=(), microphone=(), camera=()"),
)

# Server information disclosure; removed from production responses
DISCLOSURE_HEADERS: tuple[str, ...] = ("Server", "X-Powered-By")

_BASELINE_NAMES = frozenset(name.lower() for name, _ in BASELINE_SECURITY_HEADERS)


def build_security_headers(
    extra: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
) -> dict[str, str]:
    """
    Baseline headers first, then extras in the order given.
    Extras never override or remove a baseline header.
    """
    headers = dict(BASELINE_SECURITY_HEADERS)
    if not extra:
        return headers
    items = extra.items() if isinstance(extra, Mapping) else extra
    for name, value in items:
        if name.lower() in _BASELINE_NAMES:
            continue
        headers[name] = value
    return headers


def apply_headers(
    response: Response,
    headers: Mapping[str, str],
    *,
    strip_disclosure: bool = False,
) -> Response:
    for name, value in headers.items():
        response.headers[name] = value
    if strip_disclosure:
        for name in DISCLOSURE_HEADERS:
            if name in response.headers:
                del response.headers[name]
    return response
