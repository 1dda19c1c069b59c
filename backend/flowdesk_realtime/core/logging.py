"""
Structured logging for the realtime server.

HTTP requests carry a request id (set by RequestContextMiddleware) that is
stamped on every record logged while the request is handled. Records are
JSON in production and a single readable line elsewhere.
"""
import json
import logging
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flowdesk_realtime.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def configure_logging(level: Optional[str] = None):
    """Install the root handler and set the level of the server's own loggers."""
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    for name in (settings.APP_NAME, 'flowdesk_realtime'):
        logging.getLogger(name).setLevel(numeric)


class StructuredLogger:
    """Logger whose keyword arguments end up as a `context` mapping on the record."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _render(self, level: str, message: str, context: Dict[str, Any], error: Optional[BaseException]) -> str:
        request_id = get_request_id()

        if settings.APP_ENV == 'production':
            record: Dict[str, Any] = {
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'level': level,
                'logger': self.name,
                'message': message,
                'env': settings.APP_ENV,
            }
            if request_id:
                record['request_id'] = request_id
            if context:
                record['context'] = context
            if error is not None:
                record['error'] = {'type': type(error).__name__, 'message': str(error)}
            return json.dumps(record, default=str)

        line = f"[{request_id or '-'}] {message}"
        if context:
            line += ' | ' + ' '.join(f"{k}={v}" for k, v in context.items())
        if error is not None:
            line += f" | error={type(error).__name__}: {error}"
        return line

    def log(self, level: int, message: str, error: Optional[BaseException] = None, **context):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._render(logging.getLevelName(level), message, context, error))

    def debug(self, message: str, **context):
        self.log(logging.DEBUG, message, **context)

    def info(self, message: str, **context):
        self.log(logging.INFO, message, **context)

    def warning(self, message: str, **context):
        self.log(logging.WARNING, message, **context)

    def error(self, message: str, error: Optional[BaseException] = None, **context):
        self.log(logging.ERROR, message, error=error, **context)


class EmitLogger(StructuredLogger):
    """Logs emit traffic with the routing fields (scope, event, recipients) as first-class context."""

    def relayed(self, scope: str, event: str, recipients: Optional[int] = None, **context):
        if recipients is not None:
            context['recipients'] = recipients
        self.info(f"Relayed {scope} event", scope=scope, event=event, **context)

    def failed(self, scope: Optional[str], event: Optional[str], error: Optional[BaseException] = None, **context):
        self.error("Realtime emit failed", error=error, scope=scope, event=event, **context)


api_logger = StructuredLogger(f'{settings.APP_NAME}.api')
emit_logger = EmitLogger(f'{settings.APP_NAME}.emit')
