# app/core/security.py
"""
Security module for authentication.
Handles password hashing and session token creation/validation.
"""
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from app.config import settings

# Password hashing context
# Argon2 is an adaptive hash with a per-record salt
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# Session token configuration
SESSION_SECRET = settings.session_secret  # Secret key for signing (use strong secret in production)
SESSION_MAX_AGE_DAYS = settings.session_max_age_days  # Fixed validity window
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)

def session_max_age_seconds() -> int:
    return SESSION_MAX_AGE_DAYS * 24 * 60 * 60

def create_session_token(user_id: str, email: str) -> str:
    """
    Create a signed session token for an authenticated user.

    No server-side state is kept: expiry is the only invalidation besides the
    client discarding the token on logout.

    Token payload includes:
        - sub: Subject (user ID)
        - email: User email at issue time
        - iat: Issued at timestamp
        - exp: Expiration timestamp (issue time + SESSION_MAX_AGE_DAYS)
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + dt.timedelta(days=SESSION_MAX_AGE_DAYS),
    }
    return jwt.encode(payload, SESSION_SECRET, algorithm=JWT_ALG)

def decode_session_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, SESSION_SECRET, algorithms=[JWT_ALG])

def read_session_token(token: str | None) -> dict | None:
    """Return the token payload, or None if missing, expired or malformed."""
    if not token:
        return None
    try:
        payload = decode_session_token(token)
    except jwt.InvalidTokenError:
        return None
    if not payload.get("sub"):
        return None
    return payload
