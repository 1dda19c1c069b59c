import itertools
from typing import Any, List, NamedTuple, Optional

import pytest
import socketio
from httpx import AsyncClient, ASGITransport
from socketio.exceptions import ConnectionRefusedError

from flowdesk_realtime.core.config import settings
from flowdesk_realtime.core.security import create_realtime_token
from flowdesk_realtime.main import app
from flowdesk_realtime.realtime import socket as realtime_socket
from flowdesk_realtime.realtime.socket import sio


class Delivery(NamedTuple):
    sid: str
    event: str
    data: Any


class RecordingManager(socketio.AsyncManager):
    """Client manager that keeps the real room bookkeeping but records packets instead of sending them."""

    def __init__(self):
        super().__init__()
        self.deliveries: List[Delivery] = []

    async def emit(self, event, data, namespace, room=None, skip_sid=None, callback=None, to=None, **kwargs):
        room = to or room
        namespace = namespace or "/"
        if namespace not in self.rooms:
            return
        if skip_sid is None:
            skip = set()
        elif isinstance(skip_sid, (list, tuple, set)):
            skip = set(skip_sid)
        else:
            skip = {skip_sid}
        for sid, _eio_sid in self.get_participants(namespace, room):
            if sid not in skip:
                self.deliveries.append(Delivery(sid, event, data))

    def received(self, sid: str, event: Optional[str] = None) -> List[Delivery]:
        return [d for d in self.deliveries if d.sid == sid and (event is None or d.event == event)]

    def clear(self):
        self.deliveries.clear()


class FakeEngineSocket:
    """The part of an engine.io socket that session storage touches."""

    def __init__(self):
        self.session = {}
        self.closed = False


class FakeSockets:
    """Opens and closes Socket.IO connections the way the server does, minus the transport."""

    def __init__(self, manager: RecordingManager):
        self.manager = manager
        self._eio_ids = itertools.count(1)

    async def open(self, token: Optional[str] = None, auth: Any = "default") -> str:
        if auth == "default":
            auth = {"token": token} if token is not None else None
        eio_sid = f"eio-{next(self._eio_ids)}"
        sio.eio.sockets[eio_sid] = FakeEngineSocket()
        sid = await self.manager.connect(eio_sid, "/")
        try:
            await realtime_socket.connect(sid, {}, auth)
        except ConnectionRefusedError:
            await self.manager.disconnect(sid, "/")
            sio.eio.sockets.pop(eio_sid, None)
            raise
        return sid

    async def open_as(self, user_id: str) -> str:
        return await self.open(create_realtime_token(user_id))

    async def close(self, sid: str):
        eio_sid = self.manager.eio_sid_from_sid(sid, "/")
        await realtime_socket.disconnect(sid, "client disconnect")
        await self.manager.disconnect(sid, "/")
        sio.eio.sockets.pop(eio_sid, None)


@pytest.fixture
def recorder(monkeypatch) -> RecordingManager:
    manager = RecordingManager()
    manager.set_server(sio)
    manager.initialize()
    monkeypatch.setattr(sio, "manager", manager)
    monkeypatch.setattr(sio.eio, "sockets", {})
    return manager


@pytest.fixture
def sockets(recorder) -> FakeSockets:
    return FakeSockets(recorder)


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def emit_headers():
    return {"Authorization": f"Bearer {settings.REALTIME_SERVER_SECRET}"}
