"""
Signup, signin and current-user flows.

Combines a ``UserStore`` with the ``PasswordHasher`` and ``TokenCodec``.
bcrypt work runs in the threadpool so the event loop keeps serving other
requests while a hash is computed.
"""

from __future__ import annotations

import logging
import uuid

from starlette.concurrency import run_in_threadpool

from auth.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from auth.jwt import SessionClaims, TokenCodec
from auth.models import AuthResponse, UserResponse
from auth.password import PasswordHasher
from auth.store import UserStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, codec: TokenCodec) -> None:
        self._store = store
        self._hasher = hasher
        self._codec = codec

    async def signup(self, email: str, username: str, password: str) -> AuthResponse:
        """Register a new user and issue a session token."""
        # Length is counted in UTF-8 bytes.
        if not email or not username or len(password.encode()) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Email, username are required and password must be at least "
                f"{MIN_PASSWORD_LENGTH} characters"
            )

        if await self._store.exists(email, username):
            raise DuplicateUserError()

        password_hash = await run_in_threadpool(self._hasher.hash, password)
        record = await self._store.create(
            user_id=uuid.uuid4(),
            email=email,
            username=username,
            password_hash=password_hash,
        )

        token = self._codec.issue(str(record.id), record.email)
        logger.info("Registered user %s (%s)", record.username, record.id)
        return AuthResponse(user=record.to_response(), token=token)

    async def signin(self, email: str, password: str) -> AuthResponse:
        """Login with email + password."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        record = await self._store.get_by_email(email)

        if record is None or not record.password_hash:
            # Same bcrypt cost as a real mismatch; unknown emails are not distinguishable.
            await run_in_threadpool(self._hasher.dummy_verify, password)
            logger.info("Failed signin attempt")
            raise InvalidCredentialsError()

        if not await run_in_threadpool(self._hasher.verify, password, record.password_hash):
            logger.info("Failed signin attempt")
            raise InvalidCredentialsError()

        token = self._codec.issue(str(record.id), record.email)
        logger.info("Login: %s (%s)", record.username, record.id)
        return AuthResponse(user=record.to_response(), token=token)

    async def current_user(self, claims: SessionClaims) -> UserResponse:
        """Resolve verified claims to the stored user."""
        try:
            user_id = uuid.UUID(claims.subject_id)
        except ValueError as exc:
            logger.debug("Token subject is not a UUID: %r", claims.subject_id)
            raise UnauthorizedError("invalid subject id") from exc

        record = await self._store.get_by_id(user_id)
        if record is None:
            raise NotFoundError()
        return record.to_response()
