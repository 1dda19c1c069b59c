"""
Emit gateway.

Trusted backend processes POST `{scope, event, payload}` here and the event
is relayed to the matching Socket.IO rooms. Nothing is persisted, queued or
retried; users without a live connection simply miss the event.
"""
import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from flowdesk_realtime.api.deps import require_emit_secret
from flowdesk_realtime.core.config import settings
from flowdesk_realtime.core.exceptions import EmitValidationError, PayloadTooLarge
from flowdesk_realtime.core.logging import emit_logger
from flowdesk_realtime.realtime import socket as realtime_socket
from flowdesk_realtime.realtime.schemas import (
    UserEmit,
    UsersEmit,
    WorkspaceEmit,
    emit_request_adapter,
)

router = APIRouter()


def _format_errors(exc: ValidationError) -> list:
    errors = []
    for error in exc.errors():
        # Drop the union tag ("user", "users", ...) from the location
        loc = [str(part) for part in error.get('loc', ())]
        if loc and loc[0] in ('workspace', 'user', 'users'):
            loc = loc[1:]
        errors.append({
            'field': '.'.join(loc) or 'body',
            'message': error.get('msg', 'Validation error'),
            'type': error.get('type', 'value_error'),
        })
    return errors


async def _read_body(request: Request) -> Any:
    limit = settings.EMIT_MAX_BODY_BYTES

    content_length = request.headers.get('content-length')
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise PayloadTooLarge(limit)

    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLarge(limit)

    try:
        return json.loads(raw) if raw else None
    except ValueError:
        raise EmitValidationError("Request body must be valid JSON")


@router.post('/emit', dependencies=[Depends(require_emit_secret)])
async def emit(request: Request):
    """
    Relay an event to connected clients.

    - workspace: every connection
    - user: every connection of `userId`
    - users: the union of the connections of `userIds` (trimmed, de-duplicated)

    The whole request is validated before anything is sent.
    """
    body = await _read_body(request)
    if not isinstance(body, dict):
        raise EmitValidationError("Request body must be a JSON object")

    try:
        emit_request = emit_request_adapter.validate_python(body)
    except ValidationError as e:
        errors = _format_errors(e)
        first = errors[0]
        raise EmitValidationError(f"Invalid {first['field']}: {first['message']}", errors=errors)

    event = emit_request.event
    payload = emit_request.payload

    if isinstance(emit_request, WorkspaceEmit):
        await realtime_socket.broadcast_workspace(event, payload)
        emit_logger.relayed("workspace", event)
        return {"ok": True}

    if isinstance(emit_request, UserEmit):
        await realtime_socket.broadcast_user(emit_request.user_id, event, payload)
        emit_logger.relayed("user", event, user_id=emit_request.user_id)
        return {"ok": True}

    if isinstance(emit_request, UsersEmit):
        recipients = await realtime_socket.broadcast_users(emit_request.user_ids, event, payload)
        emit_logger.relayed("users", event, recipients=recipients)
        return {"ok": True, "recipients": recipients}

    raise EmitValidationError("Invalid scope")
