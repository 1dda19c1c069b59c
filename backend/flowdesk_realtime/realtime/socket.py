"""
Socket.IO server implementation.

Every authenticated connection joins exactly two rooms (see rooms.py) and
receives a `ready` event. Backend processes reach connected clients through
the emit gateway, which calls the broadcast helpers below.
"""
import time
import socketio
from socketio.exceptions import ConnectionRefusedError
from typing import Any, List, Optional
import logging

from flowdesk_realtime.core.config import settings
from flowdesk_realtime.realtime.auth import authenticate_socket
from flowdesk_realtime.realtime.events import READY
from flowdesk_realtime.realtime.rooms import (
    WORKSPACE_ROOM,
    user_room,
    user_rooms,
)

logger = logging.getLogger(__name__)

# async_mode="asgi" so the server can wrap the FastAPI app
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.cors_origins,
    cors_credentials=True,
    logger=False,
    engineio_logger=False,
)


@sio.event
async def connect(sid: str, environ: dict, auth: Optional[dict] = None):
    """
    Handle new socket connection.
    Refuses with an opaque "Unauthorized" unless the realtime token is valid.
    """
    is_authenticated, user_id = await authenticate_socket(auth)

    if not is_authenticated:
        raise ConnectionRefusedError("Unauthorized")

    await sio.save_session(sid, {"user_id": user_id})
    await subscribe(sid, user_id)
    logger.info(f"Socket connected: {sid} (user: {user_id})")


@sio.event
async def disconnect(sid: str, reason: Optional[str] = None):
    """
    Handle socket disconnection.
    Rooms are left automatically by the client manager and the session
    goes away with the engine.io socket.
    """
    try:
        session = await sio.get_session(sid)
    except KeyError:
        # the transport already dropped the engine.io socket
        session = {}
    user_id = session.get("user_id")
    logger.info(f"Socket disconnected: {sid} (user: {user_id}, reason: {reason})")


async def subscribe(sid: str, user_id: str):
    """Join the workspace room and the user's own room, then acknowledge."""
    await sio.enter_room(sid, WORKSPACE_ROOM)
    await sio.enter_room(sid, user_room(user_id))

    await sio.emit(READY, {
        "ts": int(time.time() * 1000),
        "userId": user_id,
    }, to=sid)


# ============================================================
# Broadcast helpers (called from the emit gateway)
# ============================================================

async def broadcast_workspace(event: str, payload: Any = None):
    """Emit an event to every authenticated connection."""
    await sio.emit(event, payload, to=WORKSPACE_ROOM)
    logger.debug(f"Emitted {event} to {WORKSPACE_ROOM}")


async def broadcast_user(user_id: str, event: str, payload: Any = None):
    """Emit an event to every connection of one user."""
    room_name = user_room(user_id)
    await sio.emit(event, payload, to=room_name)
    logger.debug(f"Emitted {event} to {room_name}")


async def broadcast_users(user_ids: List[str], event: str, payload: Any = None) -> int:
    """
    Emit an event to the connections of several users in one call.

    The client manager unions the rooms, so a socket in more than one of
    them still gets the event once. Returns the number of rooms addressed.
    """
    rooms = user_rooms(user_ids)
    if not rooms:
        # an empty target list would mean "everyone" to sio.emit
        return 0
    await sio.emit(event, payload, to=rooms)
    logger.debug(f"Emitted {event} to {len(rooms)} user rooms")
    return len(rooms)
