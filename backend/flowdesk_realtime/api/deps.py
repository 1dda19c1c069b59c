import hmac
from typing import Optional

from fastapi import Header

from flowdesk_realtime.core.config import settings
from flowdesk_realtime.core.exceptions import Unauthorized


async def require_emit_secret(authorization: Optional[str] = Header(None)) -> None:
    """Gate for internal callers: `Authorization: Bearer <REALTIME_SERVER_SECRET>`, exact match.

    An unset secret locks the gateway instead of opening it.
    """
    secret = settings.REALTIME_SERVER_SECRET
    if not secret or not authorization:
        raise Unauthorized()

    expected = f"Bearer {secret}"
    if not hmac.compare_digest(authorization.encode(), expected.encode()):
        raise Unauthorized()
