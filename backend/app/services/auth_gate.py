# app/services/auth_gate.py
"""
Auth gate: credential verification, registration and session resolution.

Password hashing and token signing are delegated to app.core.security; this
module only decides who the caller is.
"""
import logging
import uuid

from tortoise.exceptions import IntegrityError

from app.core.errors import AuthErrorType, AuthFailure, DuplicateEmail
from app.core.security import hash_password, read_session_token, verify_password
from app.models.user import User

logger = logging.getLogger("uvicorn.error")


async def authenticate(email: str, password: str) -> User:
    """
    Check an email/password pair.

    The email is looked up exactly as given (no case folding).

    Returns:
        User: the matching account

    Raises:
        AuthFailure(USER_NOT_FOUND): no account uses this email
        AuthFailure(INVALID_PASSWORD): the password does not match the stored hash
    """
    user = await User.get_or_none(email=email)
    if not user:
        logger.info("[auth] login rejected: unknown email")
        raise AuthFailure(AuthErrorType.USER_NOT_FOUND)
    if not verify_password(password, user.password_hash):
        logger.info("[auth] login rejected: bad password for user=%s", user.id)
        raise AuthFailure(AuthErrorType.INVALID_PASSWORD)
    return user


async def register(name: str, email: str, password: str) -> User:
    """
    Create an account.

    Uniqueness is checked with a lookup before the insert. Two concurrent
    registrations with the same email can both pass the lookup; the unique
    index then rejects the second insert, reported as DuplicateEmail too.

    Raises:
        DuplicateEmail: an account already uses this email
    """
    if await User.exists(email=email):
        raise DuplicateEmail()
    try:
        user = await User.create(
            name=name,
            email=email,
            password_hash=hash_password(password),  # Hash password before storing
        )
    except IntegrityError:
        raise DuplicateEmail()
    logger.info("[auth] registered user=%s", user.id)
    return user


async def current_user(token: str | None) -> User | None:
    """
    Resolve the user behind a session token.

    Returns None when the token is missing, expired, malformed or points to
    an account that no longer exists. Callers that need a user turn None into
    Unauthorized.
    """
    payload = read_session_token(token)
    if payload is None:
        return None
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        return None
    return await User.get_or_none(id=user_id)
