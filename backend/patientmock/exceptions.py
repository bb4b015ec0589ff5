"""API error hierarchy and the handlers that render it.

Services raise these errors; handlers registered on the application turn
them into the ``{code, message, errorCode?, details?}`` envelope.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"
    default_error_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: Any = None,
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.details = details
        super().__init__(self.message)


class ValidationError(ApiError):
    """Missing or invalid input. ``details`` carries the list of issues."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation Failed"
    default_error_code = "VAL_ERR"

    def __init__(
        self,
        issues: list[str] | str | None = None,
        message: str | None = None,
        error_code: str | None = None,
    ):
        if isinstance(issues, str):
            issues = [issues]
        self.issues: list[str] = list(issues or [])
        super().__init__(message, error_code, self.issues or None)


class ConflictError(ApiError):
    """Duplicate key or duplicate demographics."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Patient already exists"
    default_error_code = "DUP_PATIENT"


class NotFoundError(ApiError):
    """Unknown key on read, update or delete."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
    default_error_code = "NOT_FOUND"


class UnsupportedMediaTypeError(ApiError):
    """Mutating request without a JSON body."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    default_message = "Content-Type must be application/json"
    default_error_code = "INVALID_CONTENT_TYPE"


def error_envelope(
    status_code: int,
    message: str,
    error_code: str | None = None,
    details: Any = None,
) -> dict[str, Any]:
    """Build the error body shared by every endpoint."""
    body: dict[str, Any] = {"code": status_code, "message": message}
    if error_code:
        body["errorCode"] = error_code
    if details:
        body["details"] = details
    return body


def error_response(exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.status_code, exc.message, exc.error_code, exc.details),
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI body/query validation failures as 400 VAL_ERR."""
    issues = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        issues.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return error_response(ValidationError(issues, message="Bad Request"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface store failures as 500 with the underlying message. No retry."""
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "DB error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
