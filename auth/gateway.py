"""
Request authentication: header in, verified claims out.

Every protected route goes through ``AuthGateway.authenticate`` (via the
``get_current_claims`` dependency); routes never parse the header
themselves.
"""

from __future__ import annotations

import logging
from typing import Optional

from auth.bearer import extract_bearer_token
from auth.errors import (
    MissingCredentialsError,
    TokenError,
    TokenExpiredError,
    UnauthorizedError,
)
from auth.jwt import SessionClaims, TokenCodec

logger = logging.getLogger(__name__)


class AuthGateway:
    def __init__(self, codec: TokenCodec) -> None:
        self._codec = codec

    def authenticate(self, header_value: Optional[str]) -> SessionClaims:
        """
        Raises:
            MissingCredentialsError: no ``Authorization`` header
            MalformedHeaderError: header is not ``Bearer <token>``
            UnauthorizedError: token is invalid or expired
        """
        if header_value is None:
            raise MissingCredentialsError()

        token = extract_bearer_token(header_value)

        try:
            return self._codec.verify(token)
        except TokenError as exc:
            reason = "expired token" if isinstance(exc, TokenExpiredError) else "invalid token"
            logger.debug("Rejected bearer token: %s (%s)", reason, exc)
            raise UnauthorizedError(reason) from exc
