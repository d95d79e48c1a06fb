"""
Exception handlers: every failure leaves as ``{"message": ..., "code": ...}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.errors import AuthError, UnauthorizedError

logger = logging.getLogger(__name__)

_HTTP_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: "Invalid request body",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "code": status_code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain, validation and framework errors onto the error envelope."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        if isinstance(exc, UnauthorizedError):
            logger.info("401 on %s %s: %s", request.method, request.url.path, exc.reason)
        elif exc.status_code >= 500:
            logger.error("%s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug("Invalid request body on %s: %s", request.url.path, exc.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = _HTTP_MESSAGES.get(exc.status_code, str(exc.detail))
        return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
