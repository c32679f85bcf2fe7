"""Unit tests for route patterns: parse_pattern, RoutePattern.matches, matches_any."""

import pytest

from dashgate.core.gate.patterns import (
    GateConfigError,
    matches_any,
    parse_pattern,
    parse_patterns,
)


def test_parse_plain_pattern() -> None:
    p = parse_pattern("/dashboard")
    assert p.prefix == "/dashboard"
    assert p.is_wildcard is False


def test_parse_wildcard_pattern() -> None:
    p = parse_pattern("/admin*")
    assert p.prefix == "/admin"
    assert p.is_wildcard is True


def test_parse_trailing_separator_pattern() -> None:
    p = parse_pattern("/api/")
    assert p.prefix == "/api/"
    assert p.is_wildcard is True


def test_parse_strips_whitespace() -> None:
    assert parse_pattern("  /orders ").raw == "/orders"


def test_exact_pattern_boundary() -> None:
    """/dashboard matches itself and sub-paths, not /dashboard2."""
    p = parse_pattern("/dashboard")
    assert p.matches("/dashboard") is True
    assert p.matches("/dashboard/x") is True
    assert p.matches("/dashboard/today/summary") is True
    assert p.matches("/dashboard2") is False
    assert p.matches("/dash") is False


def test_wildcard_pattern_boundary() -> None:
    """/admin* matches anything starting with /admin."""
    p = parse_pattern("/admin*")
    assert p.matches("/adminpanel") is True
    assert p.matches("/admin/x") is True
    assert p.matches("/admin") is True
    assert p.matches("/adm") is False


def test_trailing_separator_requires_prefix() -> None:
    p = parse_pattern("/api/")
    assert p.matches("/api/orders") is True
    assert p.matches("/api/") is True
    assert p.matches("/api") is False


def test_root_separator_matches_everything() -> None:
    p = parse_pattern("/")
    assert p.matches("/") is True
    assert p.matches("/anything/at/all") is True


@pytest.mark.parametrize("raw", ["", "   ", "*", "dashboard", "/ad*min", "/a*/b*"])
def test_parse_rejects_malformed(raw: str) -> None:
    with pytest.raises(GateConfigError):
        parse_pattern(raw)


def test_parse_rejects_non_string() -> None:
    with pytest.raises(GateConfigError):
        parse_pattern(None)  # type: ignore[arg-type]


def test_parse_patterns_rejects_bare_string() -> None:
    """A single string is not a list of patterns (would iterate characters)."""
    with pytest.raises(GateConfigError):
        parse_patterns("/dashboard")


def test_matches_any() -> None:
    patterns = parse_patterns(["/orders", "/reports/"])
    assert matches_any("/orders/42", patterns) is True
    assert matches_any("/reports/daily", patterns) is True
    assert matches_any("/reports", patterns) is False
    assert matches_any("/menu", patterns) is False
    assert matches_any("/menu", ()) is False
