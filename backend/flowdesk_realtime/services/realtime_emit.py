"""
Emit client for backend processes.

The API process imports these helpers after it commits a write, e.g.

    await emit_users([task.owner_id, task.assignee_id], TASK_UPDATED, {"task": task_json})

Realtime delivery is best-effort: when the realtime server is not configured,
unreachable, or answers with an error, the failure is logged and the caller
carries on. Clients reconcile from the REST API anyway.
"""
from typing import Any, Dict, Iterable, Optional

import httpx

from flowdesk_realtime.core.config import settings
from flowdesk_realtime.core.logging import emit_logger


async def emit_workspace(event: str, payload: Any = None) -> Optional[Dict[str, Any]]:
    """Emit an event to every connected user."""
    return await _emit({"scope": "workspace", "event": event, "payload": payload})


async def emit_user(user_id: Optional[str], event: str, payload: Any = None) -> Optional[Dict[str, Any]]:
    """Emit an event to all sessions of one user. No-op without a user id."""
    if not user_id:
        return None
    return await _emit({"scope": "user", "userId": str(user_id), "event": event, "payload": payload})


async def emit_users(user_ids: Iterable[Optional[str]], event: str, payload: Any = None) -> Optional[Dict[str, Any]]:
    """Emit an event to several users in one request. Falsy ids are dropped, duplicates collapsed."""
    ids = list(dict.fromkeys(str(u) for u in (user_ids or []) if u))
    if not ids:
        return None
    return await _emit({"scope": "users", "userIds": ids, "event": event, "payload": payload})


async def _emit(body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    url = settings.REALTIME_SERVER_URL
    secret = settings.REALTIME_SERVER_SECRET
    if not url or not secret:
        return None

    try:
        async with httpx.AsyncClient(timeout=settings.EMIT_CLIENT_TIMEOUT_SECONDS) as client:
            res = await client.post(
                f"{url.rstrip('/')}/emit",
                json=body,
                headers={"Authorization": f"Bearer {secret}"},
            )
    except httpx.HTTPError as e:
        emit_logger.failed(body.get("scope"), body.get("event"), error=e)
        return None

    if res.is_error:
        emit_logger.failed(body.get("scope"), body.get("event"), status=res.status_code, body=res.text)
        return None

    try:
        return res.json()
    except ValueError:
        return {}
