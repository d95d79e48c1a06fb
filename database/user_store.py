"""
SQLAlchemy-backed ``UserStore``.

Uniqueness of email/username is enforced by the ``users`` table's unique
constraints; an ``IntegrityError`` on insert becomes ``DuplicateUserError``.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateUserError, InternalError
from auth.models import UserRecord
from auth.store import UserStore
from database.models import User

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _db_errors(operation: str) -> AsyncIterator[None]:
    """Translate driver/ORM failures into client-safe ``InternalError``s."""
    try:
        yield
    except (OperationalError, InterfaceError, OSError) as exc:
        logger.error("Database connection failed during %s: %s", operation, exc)
        raise InternalError("Database connection failed") from exc
    except SQLAlchemyError as exc:
        logger.error("Database error during %s: %s", operation, exc)
        raise InternalError("Database error") from exc


def _to_record(user: User, include_hash: bool = False) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        username=user.username,
        password_hash=user.password_hash if include_hash else None,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class SqlAlchemyUserStore(UserStore):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, email: str, username: str) -> bool:
        async with _db_errors("exists"):
            result = await self._session.execute(
                select(User.id)
                .where(or_(User.email == email, User.username == username))
                .limit(1)
            )
            return result.scalar_one_or_none() is not None

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        async with _db_errors("get_by_email"):
            result = await self._session.execute(
                select(User).where(User.email == email)
            )
            user = result.scalar_one_or_none()
        return _to_record(user, include_hash=True) if user else None

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRecord]:
        async with _db_errors("get_by_id"):
            user = await self._session.get(User, user_id)
        return _to_record(user) if user else None

    async def create(
        self,
        user_id: uuid.UUID,
        email: str,
        username: str,
        password_hash: str,
    ) -> UserRecord:
        now = datetime.now(timezone.utc)
        user = User(
            id=user_id,
            email=email,
            username=username,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        async with _db_errors("create"):
            try:
                self._session.add(user)
                await self._session.flush()
                await self._session.commit()
            except IntegrityError as exc:
                await self._session.rollback()
                logger.info("Signup rejected by unique constraint for %s", email)
                raise DuplicateUserError() from exc
        return _to_record(user)
