"""Unit tests for request screening."""

import pytest

from dashgate.core.gate.screening import screen_request, value_threats
from tests.utils.gate import make_ctx


def test_clean_request() -> None:
    result = screen_request(make_ctx("/dashboard", query=(("tab", "sales"),)))
    assert result.is_valid is True
    assert result.is_blocking is False
    assert result.threats == ()


@pytest.mark.parametrize(
    "user_agent",
    ["sqlmap/1.7", "Nikto/2.1.6", "python-requests/2.31", "Wget/1.21", "MyScanner"],
)
def test_scanner_user_agents_block(user_agent: str) -> None:
    result = screen_request(make_ctx("/", user_agent=user_agent))
    assert result.threats == ("suspicious_user_agent",)
    assert result.is_blocking is True


def test_empty_user_agent_not_flagged() -> None:
    assert screen_request(make_ctx("/", user_agent="")).is_valid is True


@pytest.mark.parametrize("path", ["/a/../b", "/a/..\\b", "/a/%2E%2E/b"])
def test_path_traversal_blocks(path: str) -> None:
    result = screen_request(make_ctx(path))
    assert "path_traversal" in result.threats
    assert result.is_blocking is True


def test_suspicious_extension_does_not_block() -> None:
    result = screen_request(make_ctx("/wp-login.php"))
    assert result.threats == ("suspicious_file_extension",)
    assert result.is_valid is False
    assert result.is_blocking is False


def test_query_threats_are_prefixed_and_deduplicated() -> None:
    ctx = make_ctx(
        "/orders",
        query=(("a", "javascript:alert(1)"), ("b", "<iframe src=x></iframe>")),
    )
    result = screen_request(ctx)
    assert result.threats.count("query_xss") == 1
    assert result.is_blocking is False


def test_threat_order() -> None:
    ctx = make_ctx(
        "/../x.php",
        user_agent="nmap",
        query=(("q", "1 UNION SELECT password"),),
    )
    assert screen_request(ctx).threats == (
        "suspicious_user_agent",
        "query_sql_injection",
        "path_traversal",
        "suspicious_file_extension",
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("pizza", []),
        ("DROP TABLE orders", ["sql_injection"]),
        ("<script>x</script>", ["xss"]),
        ("img onerror=alert(1)", ["xss"]),
        ("../../etc/passwd", ["path_traversal"]),
        ("%2F", ["path_traversal"]),
    ],
)
def test_value_threats(value: str, expected: list[str]) -> None:
    assert value_threats(value) == expected
