"""JWT token creation and verification.

Tokens are HS256 (symmetric HMAC) with the user's email as subject. The
token carries no role: role-gated endpoints re-read the user directory on
every request, so a role change takes effect immediately.

No revocation: once issued, a token is valid until expiry.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.mt_common.errors import UnauthenticatedError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_TOKEN_TYPE = "access"


def create_access_token(email: str) -> str:
    """Issue an access token for the given user email (default: 60 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": email,
        "type": _TOKEN_TYPE,
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Returns:
        Decoded payload dict with at minimum {"sub": ..., "type": ...}.

    Raises:
        UnauthenticatedError: signature invalid, token expired, or wrong type.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise UnauthenticatedError() from None

    if payload.get("type") != _TOKEN_TYPE or not payload.get("sub"):
        raise UnauthenticatedError()

    return payload
