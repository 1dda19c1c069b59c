"""
Request Middleware
Request id propagation, access logging and the JSON error envelope
`{detail, request_id[, errors]}` shared by every error response.
"""
import time
from typing import Any, Callable, Dict, List, Optional
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from flowdesk_realtime.core.logging import (
    api_logger,
    generate_request_id,
    get_request_id,
    request_id_var,
)

REQUEST_ID_HEADER = 'X-Request-ID'


def error_response(
    status_code: int,
    detail: Any,
    request_id: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {'detail': detail, 'request_id': request_id}
    if errors:
        content['errors'] = errors
    headers = dict(headers or {})
    headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id (taken from X-Request-ID when the caller
    sends one), logs the outcome, and turns anything a route lets escape
    into a 500 envelope. This is the only 500 path for HTTP routes.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        token = request_id_var.set(request_id)
        request.state.request_id = request_id

        started = time.perf_counter()
        label = f"{request.method} {request.url.path}"
        # health probes are polled, keep them out of the log
        quiet = request.url.path.endswith('/health')

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                api_logger.error(f"{label} -> 500 (unhandled)", error=e, duration_ms=_elapsed_ms(started))
                return error_response(500, 'Internal server error', request_id)

            response.headers[REQUEST_ID_HEADER] = request_id
            if not quiet:
                level = 'info' if response.status_code < 400 else 'warning'
                getattr(api_logger, level)(
                    f"{label} -> {response.status_code}",
                    duration_ms=_elapsed_ms(started),
                )
            return response
        finally:
            request_id_var.reset(token)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


async def http_exception_handler(request: Request, exc) -> JSONResponse:
    """Render HTTPException (and its subclasses in core.exceptions) in the shared envelope."""
    request_id = getattr(request.state, 'request_id', None) or get_request_id() or 'unknown'
    status_code = getattr(exc, 'status_code', 500)
    detail = getattr(exc, 'detail', 'Unknown error')

    if status_code >= 500:
        api_logger.error(f"HTTP {status_code}: {detail}", path=request.url.path)

    return error_response(
        status_code,
        detail,
        request_id,
        errors=getattr(exc, 'errors', None),
        headers=getattr(exc, 'headers', None),
    )
