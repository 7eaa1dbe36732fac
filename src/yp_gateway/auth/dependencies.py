"""FastAPI dependencies: get_current_user_id, require_admin.

Usage in any protected router:
    from src.yp_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: str = Depends(get_current_user_id)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.yp_common.enums import UserRole
from src.yp_common.errors import AdminRequiredError, InvalidCredentialsError
from src.yp_gateway.auth.jwt_handler import decode_access_token

# Token issuance lives in the external auth service; tokenUrl is only for Swagger UI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_token_claims(token: str = Depends(oauth2_scheme)) -> dict[str, str]:
    try:
        payload = decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None
    if not payload.get("sub"):
        raise _CREDENTIALS_EXCEPTION
    return payload


async def get_current_user_id(
    claims: dict[str, str] = Depends(get_token_claims),
) -> str:
    """Return the caller's user id (the token `sub`)."""
    return str(claims["sub"])


async def require_admin(
    claims: dict[str, str] = Depends(get_token_claims),
) -> str:
    """Verify the caller holds the admin role and return their user id.

    Raises HTTP 403 (AppError code 1006) otherwise.
    """
    if claims.get("role") != UserRole.ADMIN.value:
        raise AdminRequiredError()
    return str(claims["sub"])
