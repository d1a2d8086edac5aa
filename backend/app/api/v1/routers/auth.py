# app/api/v1/routers/auth.py
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from app.api.v1.cors import preflight_response
from app.api.v1.deps import get_optional_user
from app.config import settings
from app.core.errors import (
    AUTH_ERROR_MESSAGES,
    AuthErrorType,
    AuthFailure,
    Unauthorized,
)
from app.core.security import create_session_token, session_max_age_seconds
from app.models.user import User
from app.schemas.auth import LoginIn, RegisterIn, UserOut
from app.services import auth_gate

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")

BAD_LOGIN_MESSAGE = "Email ou mot de passe incorrect"

def _auth_error(kind: AuthErrorType, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"errorType": kind.value, "message": AUTH_ERROR_MESSAGES[kind]},
    )

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new user account.

    Creates a new user with the provided name, email and password. The password
    is hashed before storage. Email must be unique across all users.

    Returns:
        dict: {"data": {id, name, email, createdAt}, "message": ...} with 201

    Errors:
        - 400: invalid name/email/password (first validation message)
        - 409: email already registered
    """
    user = await auth_gate.register(body.name, body.email, body.password)
    return {
        "data": UserOut.from_model(user, with_created_at=True).to_json(),
        "message": "Compte créé avec succès",
    }

@router.options("/register")
async def register_preflight():
    return preflight_response("POST, OPTIONS")

@router.post("/check-credentials")
async def check_credentials(request: Request):
    """
    Explain why a login attempt fails.

    Used by the login form after a rejected sign-in to tell the user whether
    the email is unknown or the password is wrong.

    Returns:
        - 400 {"errorType": "INVALID_DATA", ...}: malformed payload
        - 401 {"errorType": "USER_NOT_FOUND" | "INVALID_PASSWORD", ...}
        - 500 {"errorType": "SERVER_ERROR", ...}: unexpected failure
        - 200 {"data": {"valid": true}}: the credentials are correct
    """
    try:
        body = LoginIn.model_validate(await request.json())
    except (ValueError, PydanticValidationError):
        return _auth_error(AuthErrorType.INVALID_DATA, status.HTTP_400_BAD_REQUEST)

    try:
        await auth_gate.authenticate(body.email, body.password)
    except AuthFailure as e:
        return _auth_error(e.kind, status.HTTP_401_UNAUTHORIZED)
    except Exception:
        logger.exception("[auth] check-credentials failed")
        return _auth_error(AuthErrorType.SERVER_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return {"data": {"valid": True}}

@router.options("/check-credentials")
async def check_credentials_preflight():
    return preflight_response("POST, OPTIONS")

@router.post("/login")
async def login(body: LoginIn, response: Response):
    """
    Authenticate and open a session.

    The signed session token is only delivered as an HttpOnly cookie valid for
    SESSION_MAX_AGE_DAYS; it never appears in the response body.

    Raises:
        Unauthorized (401): unknown email or wrong password (same message for both)
    """
    try:
        user = await auth_gate.authenticate(body.email, body.password)
    except AuthFailure:
        raise Unauthorized(BAD_LOGIN_MESSAGE)
    token = create_session_token(str(user.id), user.email)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=session_max_age_seconds(),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return {"data": UserOut.from_model(user).to_json()}

@router.options("/login")
async def login_preflight():
    return preflight_response("POST, OPTIONS")

@router.post("/logout")
async def logout(response: Response):
    """
    Log out by clearing the session cookie.

    No server-side state changes: a copy of the token kept elsewhere stays
    valid until it expires.
    """
    response.delete_cookie(settings.session_cookie_name)
    return {"data": None, "message": "Déconnecté"}

@router.options("/logout")
async def logout_preflight():
    return preflight_response("POST, OPTIONS")

@router.get("/session")
async def session(user: User | None = Depends(get_optional_user)):
    """
    Current session, as seen by the server.

    Returns:
        dict: {"data": {id, name, email}} when authenticated, {"data": null} otherwise
    """
    return {"data": UserOut.from_model(user).to_json() if user else None}
