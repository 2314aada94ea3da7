# backend/app/errors.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from .middleware.request_id import REQUEST_ID_HEADER

log = logging.getLogger("natureestate.errors")


class AppError(HTTPException):
    """
    Base for every domain failure.

    `kind` is the stable machine-readable code clients switch on; `detail`
    stays a human message. Subclasses pin the status code.
    """

    status_code_default = 500
    kind = "internal_error"

    def __init__(self, message: str | None = None, *, errors: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(status_code=self.status_code_default, detail=message or self.kind.replace("_", " "))
        self.errors = errors


# ---- 400 ----
class ValidationError(AppError):
    status_code_default = 400
    kind = "validation_error"


class InvalidFilterValue(ValidationError):
    def __init__(self, field: str, value: Any, expected: str) -> None:
        super().__init__(
            f"invalid value for {field}: {value!r} (expected {expected})",
            errors=[{"field": field, "value": value, "expected": expected}],
        )
        self.field = field
        self.value = value
        self.expected = expected


# ---- 401 / 403 ----
class AuthenticationError(AppError):
    status_code_default = 401
    kind = "authentication_error"


class MissingToken(AuthenticationError):
    kind = "missing_token"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "access token required")


class InvalidToken(AuthenticationError):
    status_code_default = 403
    kind = "invalid_token"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "invalid or expired token")


class UnknownUser(AuthenticationError):
    kind = "unknown_user"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "user not found")


class InvalidCredentials(AuthenticationError):
    kind = "invalid_credentials"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "invalid email or password")


class InvalidRefreshToken(AuthenticationError):
    kind = "invalid_refresh_token"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "invalid refresh token")


class ExpiredSession(AuthenticationError):
    kind = "expired_session"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "session expired")


class AuthorizationError(AppError):
    status_code_default = 403
    kind = "forbidden"


# ---- 404 / 409 ----
class NotFoundError(AppError):
    status_code_default = 404
    kind = "not_found"


class ConflictError(AppError):
    status_code_default = 409
    kind = "conflict"


class DuplicateEmail(ConflictError):
    kind = "duplicate_email"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "user with this email already exists")


class DuplicateSave(ConflictError):
    kind = "duplicate_save"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "property already saved")


# ---- 503 ----
class StoreUnavailable(AppError):
    status_code_default = 503
    kind = "store_unavailable"


def _body(kind: str, message: str, errors: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    out: dict[str, Any] = {"success": False, "error": kind, "message": message}
    if errors:
        out["errors"] = errors
    return out


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request failed: %s", exc.detail, extra={"kind": exc.kind})
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(exc.kind, str(exc.detail), exc.errors),
        headers=getattr(exc, "headers", None),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # routing-level failures (404 unknown path, 405) raised by starlette/fastapi
    kind = {404: "not_found", 405: "method_not_allowed", 401: "authentication_error", 403: "forbidden"}.get(
        exc.status_code, "http_error"
    )
    return JSONResponse(status_code=exc.status_code, content=_body(kind, str(exc.detail)))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        errors.append(
            {
                "loc": [str(x) for x in (err.get("loc") or ())],
                "msg": str(err.get("msg")),
                "type": err.get("type"),
            }
        )
    return JSONResponse(status_code=400, content=_body("validation_error", "request validation failed", errors))


def _with_request_id(request: Request, body: dict[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
    # 5xx bodies carry the request id
    rid = getattr(request.state, "request_id", None)
    if not rid:
        return body, {}
    body["request_id"] = rid
    return body, {REQUEST_ID_HEADER: rid}


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.exception("database error on %s %s", request.method, request.url.path)
    body, headers = _with_request_id(request, _body(StoreUnavailable.kind, "data store unavailable"))
    return JSONResponse(status_code=503, content=body, headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    body, headers = _with_request_id(request, _body("internal_error", "internal server error"))
    return JSONResponse(status_code=500, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
