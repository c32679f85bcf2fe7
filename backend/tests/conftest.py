from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from dashgate.core.gate import GateConfig, ratelimit
from dashgate.main import app
from tests.utils.gate import make_config


@pytest.fixture(autouse=True)
def _memory_rate_limiter() -> Generator[None, None, None]:
    """In-memory rate limiter with a clean slate for every test."""
    ratelimit._memory.clear()
    with patch.object(ratelimit, "_get_redis", return_value=None):
        yield
    ratelimit._memory.clear()


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def closed_config() -> GateConfig:
    return make_config(fail_mode="closed", closed_action="redirect")


@pytest.fixture
def open_config() -> GateConfig:
    return make_config(fail_mode="open")
