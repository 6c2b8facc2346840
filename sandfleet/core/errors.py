# sandfleet/core/errors.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

log = logging.getLogger("sandfleet.errors")


# -----------------------------
# Domain exceptions
# -----------------------------
class AppError(Exception):
    """Base class for errors that map onto a JSON error envelope."""

    status_code = 500
    typ = "internal_error"
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None, *, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input; `details` carries field-level problems."""

    status_code = 400
    typ = "validation_error"
    default_message = "Validation failed."


class ConflictError(AppError):
    status_code = 409
    typ = "conflict"
    default_message = "Resource already exists."


class NotFoundError(AppError):
    status_code = 404
    typ = "not_found"
    default_message = "Resource not found."


class AuthorizationError(AppError):
    status_code = 403
    typ = "forbidden"
    default_message = "Insufficient privileges."


class InternalError(AppError):
    pass


def field_error(field: str, message: str) -> Dict[str, Any]:
    """Shape a single field problem like FastAPI's own validation errors."""
    return {"loc": ["body", field], "msg": message, "type": "value_error"}


# -----------------------------
# Trace / request id helpers
# -----------------------------
def _ensure_trace_id(request: Request) -> str:
    """
    Return a stable trace_id for this request.
    Prefer the value set by RequestLoggingMiddleware, then inbound headers,
    and finally generate a new one.
    """
    val = getattr(request.state, "trace_id", None)
    if val:
        return str(val)

    for h in ("x-request-id", "x-correlation-id", "x-trace-id"):
        v = request.headers.get(h)
        if v:
            request.state.trace_id = v
            return v

    new_id = uuid.uuid4().hex
    request.state.trace_id = new_id
    return new_id


def _payload(
    *,
    message: str,
    typ: str,
    status: int,
    trace_id: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "ok": False,
        "error": {
            "type": typ,
            "message": message,
            "status": status,
            "trace_id": trace_id,
        },
    }
    if details is not None:
        body["error"]["details"] = jsonable_encoder(details)
    return body


def _error_response(
    request: Request,
    *,
    status: int,
    typ: str,
    message: str,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    trace_id = _ensure_trace_id(request)
    out_headers = dict(headers or {})
    out_headers["X-Request-ID"] = trace_id
    return JSONResponse(
        status_code=status,
        headers=out_headers,
        content=_payload(
            message=message, typ=typ, status=status, trace_id=trace_id, details=details
        ),
    )


# -----------------------------
# Install / register handlers
# -----------------------------
def register_exception_handlers(app: FastAPI) -> None:
    """
    Registers consistent JSON error handlers.
    Storage exceptions never leak to the caller; they are logged with a traceback
    and answered with a generic internal_error.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        log.log(
            level,
            "%s %s %s -> %s | message=%s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return _error_response(
            request,
            status=exc.status_code,
            typ=exc.typ,
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(HTTPException)
    async def http_exc_handler(request: Request, exc: HTTPException):
        status_code = int(exc.status_code)
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        details = exc.detail if isinstance(exc.detail, dict) else None

        level = logging.ERROR if status_code >= 500 else logging.WARNING
        log.log(
            level,
            "HTTPException %s %s -> %s | detail=%r",
            request.method,
            request.url.path,
            status_code,
            exc.detail,
        )
        typ = {401: "unauthorized", 403: "forbidden", 404: "not_found"}.get(
            status_code, "http_error"
        )
        return _error_response(
            request,
            status=status_code,
            typ=typ,
            message=message,
            details=details,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        log.warning(
            "ValidationError %s %s -> 400 | errors=%s",
            request.method,
            request.url.path,
            errors,
        )
        return _error_response(
            request,
            status=400,
            typ="validation_error",
            message="Validation failed.",
            details=errors,
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exc_handler(request: Request, exc: SQLAlchemyError):
        log.exception(
            "Storage failure %s %s -> 500", request.method, request.url.path
        )
        return _error_response(
            request, status=500, typ="internal_error", message="Internal server error."
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        # Full traceback to server logs; generic message to client
        log.exception(
            "Unhandled exception %s %s -> 500", request.method, request.url.path
        )
        return _error_response(
            request, status=500, typ="internal_error", message="Internal server error."
        )
