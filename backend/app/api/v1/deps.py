# app/api/v1/deps.py
from fastapi import Header, Request
from app.config import settings
from app.core.errors import Unauthorized
from app.models.user import User
from app.services.auth_gate import current_user

def session_token_from_request(request: Request, authorization: str | None) -> str | None:
    """
    Extract the session token from either:
    1. Authorization header (Bearer token) - used by non-browser clients
    2. HttpOnly session cookie - set by the login endpoint
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie
    if not token:
        token = request.cookies.get(settings.session_cookie_name)
    return token

async def get_optional_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User | None:
    """
    FastAPI dependency returning the authenticated user, or None.

    A missing, expired or malformed token simply yields None.
    """
    return await current_user(session_token_from_request(request, authorization))

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        Unauthorized (401): If no valid session resolves to an existing user

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    user = await current_user(session_token_from_request(request, authorization))
    if not user:
        raise Unauthorized()
    return user
