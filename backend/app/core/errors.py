# app/core/errors.py
"""
Error taxonomy and the handlers that turn errors into JSON responses.

Every failure crosses the HTTP boundary as {"error": "<message>"} with the
status code of its category. Unknown exceptions become a generic 500 and are
only logged server-side.
"""
import json
import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("uvicorn.error")

INVALID_DATA_MESSAGE = "Données invalides"
INTERNAL_ERROR_MESSAGE = "Une erreur interne est survenue"


class AppError(Exception):
    """Base class for errors with a user-facing message and an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = INVALID_DATA_MESSAGE


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Non autorisé"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ressource non trouvée"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflit"


class DuplicateEmail(Conflict):
    default_message = "Un compte avec cet email existe déjà"


class InternalError(AppError):
    pass


class AuthErrorType(str, Enum):
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_DATA = "INVALID_DATA"
    SERVER_ERROR = "SERVER_ERROR"


AUTH_ERROR_MESSAGES = {
    AuthErrorType.USER_NOT_FOUND: "Aucun utilisateur ne correspond à cette adresse email",
    AuthErrorType.INVALID_PASSWORD: "Le mot de passe saisi est incorrect",
    AuthErrorType.INVALID_DATA: INVALID_DATA_MESSAGE,
    AuthErrorType.SERVER_ERROR: "Erreur serveur",
}


class AuthFailure(Exception):
    """Credential check failed; `kind` tells which step rejected it."""

    def __init__(self, kind: AuthErrorType):
        self.kind = kind
        self.message = AUTH_ERROR_MESSAGES[kind]
        super().__init__(self.message)


def error_body(message: str) -> dict:
    return {"error": message}


def first_validation_message(errors) -> str:
    """
    Pick a readable message out of pydantic's error list.

    Messages raised from our own validators are returned verbatim (without
    pydantic's "Value error, " prefix).
    """
    for err in errors:
        ctx = err.get("ctx") or {}
        if isinstance(ctx.get("error"), Exception):
            return str(ctx["error"])
        if err.get("type") == "json_invalid":
            return "Corps de requête JSON invalide"
        if err.get("msg"):
            return err["msg"]
    return INVALID_DATA_MESSAGE


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(first_validation_message(exc.errors())),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else json.dumps(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(detail),
        headers=getattr(exc, "headers", None),
    )


async def catch_unexpected_errors(request: Request, call_next):
    """HTTP middleware: anything that escapes a handler becomes a generic 500."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("[api] unhandled error on %s %s", request.method, request.url.path)
        return await app_error_handler(request, InternalError())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.middleware("http")(catch_unexpected_errors)
