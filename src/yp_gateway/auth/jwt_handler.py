"""JWT access-token verification.

Tokens are issued by the platform's auth service; this backend only verifies
them. Both sides share one JWT_SECRET (HS256).

Expected claims:
  sub:  user id (matches wallets.user_id)
  type: "access"
  role: "user" | "admin"  (missing role is treated as "user")
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.yp_common.enums import UserRole
from src.yp_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def create_access_token(
    user_id: str,
    role: UserRole = UserRole.USER,
    expires_in: timedelta = timedelta(minutes=30),
) -> str:
    """Issue an access token. Used by tests and local tooling only."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "role": role.value,
        "iat": now,
        "exp": now + expires_in,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or the
            token is not an access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    return payload
