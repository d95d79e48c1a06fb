"""
Error taxonomy for the authentication core.

Every error that can reach a client derives from ``AuthError`` and carries
the HTTP status and a client-safe message.  Internal detail (why a token was
rejected, which query failed) stays in the exception chain and the logs.
"""

from __future__ import annotations

from fastapi import status

UNAUTHORIZED_MESSAGE = "Unauthorized"


class AuthError(Exception):
    """Base class for errors mapped onto the ``{message, code}`` envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class DuplicateUserError(AuthError):
    # 400 rather than 409, kept for client compatibility.
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User with this email or username already exists"


class InvalidCredentialsError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class NotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class InternalError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"


class HashingError(InternalError):
    """bcrypt failed, or a stored hash is not a bcrypt hash at all."""

    def __init__(self, detail: str = "password hashing failed") -> None:
        super().__init__()
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


# ── Request authentication ────────────────────────────────────────────
#
# Missing, malformed, invalid and expired credentials all render the same
# 401 body.  The subclasses exist for logging and tests only.


class UnauthorizedError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = UNAUTHORIZED_MESSAGE

    def __init__(self, reason: str = "unauthorized") -> None:
        super().__init__(UNAUTHORIZED_MESSAGE)
        self.reason = reason


class MissingCredentialsError(UnauthorizedError):
    def __init__(self, reason: str = "missing authorization header") -> None:
        super().__init__(reason)


class MalformedHeaderError(UnauthorizedError):
    def __init__(self, reason: str = "malformed authorization header") -> None:
        super().__init__(reason)


# ── Token codec ───────────────────────────────────────────────────────


class TokenError(Exception):
    """Base exception for token errors."""


class TokenExpiredError(TokenError):
    """Token is well-formed and correctly signed but past its expiry."""


class TokenInvalidError(TokenError):
    """Bad signature, bad structure, wrong algorithm or missing claims."""


# ── Startup ───────────────────────────────────────────────────────────


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration; raised while building the app, never per request."""
