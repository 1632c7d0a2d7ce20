"""FastAPI dependencies for authenticated and admin routes."""
from fastapi import Depends, Header, HTTPException

from electromart.errors import ERROR_ACCESS_DENIED, ERROR_UNAUTHORIZED
from electromart.services.models import AuthUser
from .session import verify_web_session_token


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


async def verify_session(
    authorization: str = Header(None, alias="Authorization"),
) -> AuthUser:
    """Resolve `Authorization: Bearer <token>` to the signed-in user."""
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)

    user = verify_web_session_token(token)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid session token")
    return user


async def verify_admin(user: AuthUser = Depends(verify_session)) -> AuthUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail=ERROR_ACCESS_DENIED)
    return user
