"""
Session token issuance and verification.

Tokens are standard three-part JWTs (``header.payload.signature``) signed
with HMAC-SHA256.  The payload carries ``sub``, ``email``, ``iat`` and
``exp`` as Unix seconds.  The secret, lifetime and clock are injected by
the caller (see ``main.create_app``); nothing here reads the environment.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
from pydantic import BaseModel

from auth.errors import ConfigurationError, TokenExpiredError, TokenInvalidError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(hours=24)
_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionClaims(BaseModel):
    """Verified token payload."""

    subject_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Issues and verifies signed, expiring session tokens."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ConfigurationError("JWT_SECRET must be set")
        self._secret = secret
        self._ttl_seconds = int(ttl.total_seconds())
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self._ttl_seconds)

    def issue(self, subject_id: str, email: str) -> str:
        """Create a signed token for ``subject_id`` valid for the configured TTL."""
        issued_at = int(self._clock().timestamp())
        payload = {
            "sub": str(subject_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> SessionClaims:
        """
        Decode and validate a token.

        Raises:
            TokenExpiredError: signature is good but ``now > exp``
            TokenInvalidError: anything else wrong with the token
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                # Expiry is checked below against the injected clock.
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(f"Invalid token: {exc}") from exc

        sub, email = payload["sub"], payload["email"]
        iat, exp = payload["iat"], payload["exp"]
        if not isinstance(sub, str) or not isinstance(email, str):
            raise TokenInvalidError("Invalid token: sub and email must be strings")
        if not _is_timestamp(iat) or not _is_timestamp(exp):
            raise TokenInvalidError("Invalid token: iat and exp must be integers")

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if self._clock() > expires_at:
            raise TokenExpiredError("Token has expired")

        return SessionClaims(
            subject_id=sub,
            email=email,
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=expires_at,
        )


def _is_timestamp(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
