from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from flowdesk_realtime.core.config import settings


class RealtimeAuthError(Exception):
    """A realtime token failed validation. `reason` is for server logs only."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def _signing_secret() -> str:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET is missing")
    return settings.JWT_SECRET


def create_realtime_token(
    user_id: str,
    *,
    email: Optional[str] = None,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint a short-lived token that only the realtime server accepts.

    Uses its own audience so it can never be replayed as a session token,
    and carries `rt: true` so a session token can never be replayed here.
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.REALTIME_TOKEN_TTL_SECONDS)

    claims = {
        "typ": "realtime",
        "rt": True,
        "iss": settings.REALTIME_TOKEN_ISSUER,
        "aud": settings.REALTIME_TOKEN_AUDIENCE,
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    if email is not None:
        claims["email"] = email
    if name is not None:
        claims["name"] = name

    return jwt.encode(claims, _signing_secret(), algorithm=settings.JWT_ALGORITHM)


def verify_realtime_token(token: Optional[str]) -> str:
    """
    Validate a realtime token and return its subject (the user id).

    Checks, in order: presence, signature, expiry, audience (and issuer),
    the `rt` marker, and a non-empty subject. Raises RealtimeAuthError.
    """
    if not token or not isinstance(token, str) or not token.strip():
        raise RealtimeAuthError("missing token")

    try:
        secret = _signing_secret()
    except RuntimeError as e:
        raise RealtimeAuthError(str(e))

    issuer = settings.REALTIME_TOKEN_ISSUER if settings.REALTIME_VERIFY_ISSUER else None

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.REALTIME_TOKEN_AUDIENCE,
            issuer=issuer,
            options={"require_exp": True, "require_aud": True},
        )
    except ExpiredSignatureError:
        raise RealtimeAuthError("token expired")
    except JWTClaimsError as e:
        raise RealtimeAuthError(f"invalid claims: {e}")
    except JWTError as e:
        raise RealtimeAuthError(f"invalid token: {e}")

    if payload.get("rt") is not True:
        raise RealtimeAuthError("not a realtime token")

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.strip():
        raise RealtimeAuthError("missing sub")

    return sub
