"""Pytest session helpers for backend test runs.

Lives at the backend/ root so `flowdesk_realtime` is importable and the
settings below are in place before any test module imports the app.
"""
import pytest

from flowdesk_realtime.core.config import settings

TEST_JWT_SECRET = "test-jwt-secret"
TEST_EMIT_SECRET = "test-emit-secret"


@pytest.fixture(autouse=True)
def realtime_secrets(monkeypatch):
    """Every test starts with known secrets; tests that need them unset patch again."""
    monkeypatch.setattr(settings, "JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "REALTIME_SERVER_SECRET", TEST_EMIT_SECRET)
    monkeypatch.setattr(settings, "REALTIME_VERIFY_ISSUER", True)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
