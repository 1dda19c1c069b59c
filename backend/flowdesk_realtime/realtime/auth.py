"""
Socket.IO authentication module.
Validates realtime tokens for socket connections.
"""
from typing import Optional, Tuple
import logging

from flowdesk_realtime.core.security import RealtimeAuthError, verify_realtime_token

logger = logging.getLogger(__name__)


async def authenticate_socket(auth: Optional[dict] = None) -> Tuple[bool, Optional[str]]:
    """
    Authenticate a Socket.IO connection using a realtime token.

    The token only comes from the handshake auth object (`auth.token`).
    Cookies and headers are ignored: the socket may live on another origin
    where neither is reliably sent.

    Returns:
        Tuple of (is_authenticated, user_id)
    """
    token = None
    if auth and isinstance(auth, dict):
        token = auth.get("token")

    try:
        user_id = verify_realtime_token(token)
    except RealtimeAuthError as e:
        logger.warning(f"Socket connection rejected: {e.reason}")
        return False, None

    logger.debug(f"Socket authenticated for user {user_id}")
    return True, user_id
