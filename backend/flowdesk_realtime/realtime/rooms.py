"""
Room naming.

Rooms are the only routing state: emits address rooms, never sids. The
user id of a connection is kept in its Socket.IO session.

Rooms:
- workspace:global - every authenticated connection
- user:{user_id} - every connection (tab/device) of one user
"""
from typing import Iterable, List

WORKSPACE_ROOM = "workspace:global"
USER_ROOM_PREFIX = "user:"


def user_room(user_id: str) -> str:
    return f"{USER_ROOM_PREFIX}{user_id}"


def user_rooms(user_ids: Iterable[str]) -> List[str]:
    return [user_room(user_id) for user_id in user_ids]
