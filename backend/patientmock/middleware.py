"""HTTP middleware: method override, JSON enforcement, request logging and security headers."""

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers, QueryParams
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from patientmock.config import settings
from patientmock.exceptions import UnsupportedMediaTypeError, error_response

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"}
JSON_BODY_METHODS = {"POST", "PUT", "PATCH"}


class MethodOverrideMiddleware:
    """Rewrite the request method from ``X-HTTP-Method-Override`` or ``?_method=``.

    Runs before routing, for clients that can only send GET and POST.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            override = Headers(scope=scope).get("x-http-method-override") or QueryParams(
                scope.get("query_string", b"")
            ).get("_method")
            if override and override.upper() in OVERRIDABLE_METHODS:
                scope = dict(scope)
                scope["method"] = override.upper()
        await self.app(scope, receive, send)


class RequireJsonMiddleware(BaseHTTPMiddleware):
    """Reject POST/PUT/PATCH requests whose body is not declared as JSON."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method in JSON_BODY_METHODS:
            content_type = request.headers.get("content-type", "")
            if content_type.split(";")[0].strip().lower() != "application/json":
                return error_response(UnsupportedMediaTypeError())
        return await call_next(request)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        logger.info(
            "%s %s - Status: %d - Time: %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware stack.

    Starlette runs the last added middleware first, so the effective
    order is: method override, logging, CORS, security headers, JSON
    enforcement.
    """
    app.add_middleware(RequireJsonMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-User", "X-HTTP-Method-Override"],
        expose_headers=["Location", "X-Process-Time"],
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(MethodOverrideMiddleware)
