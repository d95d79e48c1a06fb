"""
FastAPI dependencies for authentication.

The hasher, codec and gateway are built once by ``main.create_app`` and
kept on ``app.state``; these functions hand them to route handlers.
``get_current_claims`` is the single entry point for protected routes.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.gateway import AuthGateway
from auth.jwt import SessionClaims, TokenCodec
from auth.password import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from database.session import get_db_session
from database.user_store import SqlAlchemyUserStore


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_auth_gateway(request: Request) -> AuthGateway:
    return request.app.state.auth_gateway


async def get_user_store(
    session: AsyncSession = Depends(db_session),
) -> UserStore:
    return SqlAlchemyUserStore(session)


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(store, hasher, codec)


def get_current_claims(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> SessionClaims:
    """
    Verify the ``Authorization: Bearer <token>`` header and return the
    session claims.  Any failure raises a 401-class ``AuthError``.
    """
    return gateway.authenticate(authorization)
