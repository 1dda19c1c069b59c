import pytest

from flowdesk_realtime.api.health import health

pytestmark = pytest.mark.anyio


async def test_health_endpoint(client):
    res = await client.get('/health')
    assert res.status_code == 200
    assert res.json() == {"ok": True}


async def test_health_needs_no_auth(client, monkeypatch):
    from flowdesk_realtime.core.config import settings
    monkeypatch.setattr(settings, "REALTIME_SERVER_SECRET", "")

    res = await client.get('/health')
    assert res.status_code == 200


def test_health_handler():
    assert health() == {"ok": True}


async def test_unknown_route(client):
    res = await client.get('/nope')
    assert res.status_code == 404
    assert "request_id" in res.json()
