# app/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request models for registration, login and credential checks, and
the public user representation returned to clients.
"""
import re
import datetime as dt
from pydantic import BaseModel, field_validator

from app.config import settings

__all__ = ["LoginIn", "RegisterIn", "UserOut"]

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NAME_RE = re.compile(r"^[a-zA-ZÀ-ÿ\s'-]+$")
PASSWORD_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[!@#$%^&*.,;:/?+=()_-]"),
)


def _check_email(value: str) -> str:
    if not value:
        raise ValueError("L'email est requis")
    if len(value) > settings.email_max_length:
        raise ValueError("Email trop long")
    if not EMAIL_RE.match(value):
        raise ValueError("Format d'email invalide")
    return value


def _check_password_length(value: str) -> str:
    if not value:
        raise ValueError("Le mot de passe est requis")
    if len(value) < settings.password_min_length:
        raise ValueError("Mot de passe trop court")
    return value


class LoginIn(BaseModel):
    """
    Request model for login and credential checks.
    The email is matched exactly as typed.
    """
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_well_formed(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        return _check_password_length(v)


class RegisterIn(BaseModel):
    """
    Request model for account creation.
    Enforces the sign-up form rules for name, email and password strength.
    """
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def name_valid(cls, v: str) -> str:
        if not v:
            raise ValueError("Le nom est requis")
        if len(v) < settings.user_name_min_length:
            raise ValueError("Nom trop court")
        if len(v) > settings.user_name_max_length:
            raise ValueError("Nom trop long")
        if not NAME_RE.match(v):
            raise ValueError("Le nom contient des caractères invalides")
        return v

    @field_validator("email")
    @classmethod
    def email_well_formed(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def password_strong(cls, v: str) -> str:
        _check_password_length(v)
        if not all(pattern.search(v) for pattern in PASSWORD_CLASSES):
            raise ValueError(
                "Le mot de passe doit contenir au moins une minuscule, une majuscule, "
                "un chiffre et un caractère spécial"
            )
        return v


class UserOut(BaseModel):
    """
    Public user representation. Never includes the password hash.
    """
    id: str
    name: str
    email: str
    createdAt: dt.datetime | None = None

    @classmethod
    def from_model(cls, user, with_created_at: bool = False) -> "UserOut":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            createdAt=user.created_at if with_created_at else None,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
