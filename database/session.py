"""
Async engine and per-request sessions backing ``SqlAlchemyUserStore``.

The session yielded here is never committed on exit: the user store
commits its own writes, so a signup is durable before its token leaves the
server.  Anything left uncommitted when a request fails is rolled back.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config.settings import config

logger = logging.getLogger(__name__)

engine = create_async_engine(
    config.database_url,
    echo=config.debug,
    pool_size=config.db_pool_size,
    max_overflow=config.db_max_overflow,
    pool_pre_ping=True,
)

user_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for one request's ``UserStore``."""
    async with user_session_factory() as session:
        try:
            yield session
        except Exception as exc:
            logger.warning("Rolling back user store session: %s", type(exc).__name__)
            await session.rollback()
            raise
