"""
Tests for SqlAlchemyUserStore error translation and the request session (both mocked).
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from auth.errors import DuplicateUserError, InternalError
from database.models import User
from database.session import get_db_session
from database.user_store import SqlAlchemyUserStore


def _mock_session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock()
    return session


def _row(**overrides) -> User:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    values = dict(
        id=uuid.uuid4(),
        email="a@x.com",
        username="alice",
        password_hash="$2b$04$abcdefghijklmnopqrstuu",
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return User(**values)


class TestLookups:
    @pytest.mark.asyncio
    async def test_get_by_email_includes_hash(self):
        session = _mock_session()
        row = _row()
        session.execute.return_value.scalar_one_or_none = MagicMock(return_value=row)

        record = await SqlAlchemyUserStore(session).get_by_email("a@x.com")

        assert record.id == row.id
        assert record.password_hash == row.password_hash

    @pytest.mark.asyncio
    async def test_get_by_id_omits_hash(self):
        session = _mock_session()
        row = _row()
        session.get.return_value = row

        record = await SqlAlchemyUserStore(session).get_by_id(row.id)

        assert record.email == "a@x.com"
        assert record.password_hash is None

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self):
        session = _mock_session()
        session.get.return_value = None
        assert await SqlAlchemyUserStore(session).get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_exists(self):
        session = _mock_session()
        session.execute.return_value.scalar_one_or_none = MagicMock(return_value=uuid.uuid4())
        assert await SqlAlchemyUserStore(session).exists("a@x.com", "alice") is True


class TestCreate:
    @pytest.mark.asyncio
    async def test_returns_record_without_hash(self):
        session = _mock_session()
        user_id = uuid.uuid4()

        record = await SqlAlchemyUserStore(session).create(user_id, "a@x.com", "alice", "$2b$04$hash")

        session.add.assert_called_once()
        session.flush.assert_awaited_once()
        session.commit.assert_awaited_once()
        assert record.id == user_id
        assert record.password_hash is None

    @pytest.mark.asyncio
    async def test_unique_violation_is_duplicate_user(self):
        session = _mock_session()
        session.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

        with pytest.raises(DuplicateUserError):
            await SqlAlchemyUserStore(session).create(uuid.uuid4(), "a@x.com", "alice", "$2b$04$hash")
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unique_violation_at_commit_is_duplicate_user(self):
        session = _mock_session()
        session.commit.side_effect = IntegrityError("COMMIT", {}, Exception("duplicate key"))

        with pytest.raises(DuplicateUserError):
            await SqlAlchemyUserStore(session).create(uuid.uuid4(), "a@x.com", "alice", "$2b$04$hash")
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_is_internal_error(self):
        session = _mock_session()
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("connection reset"))

        with pytest.raises(InternalError) as exc_info:
            await SqlAlchemyUserStore(session).create(uuid.uuid4(), "a@x.com", "alice", "$2b$04$hash")
        assert exc_info.value.message == "Database connection failed"


class TestErrorTranslation:
    @pytest.mark.asyncio
    async def test_connection_failure(self):
        session = _mock_session()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(InternalError) as exc_info:
            await SqlAlchemyUserStore(session).get_by_email("a@x.com")
        assert exc_info.value.message == "Database connection failed"

    @pytest.mark.asyncio
    async def test_other_database_error(self):
        session = _mock_session()
        session.execute.side_effect = ProgrammingError("SELECT", {}, Exception("relation missing"))

        with pytest.raises(InternalError) as exc_info:
            await SqlAlchemyUserStore(session).exists("a@x.com", "alice")
        assert exc_info.value.message == "Database error"
        assert "relation" not in exc_info.value.message


class TestRequestSession:
    @staticmethod
    def _factory(session):
        factory = MagicMock()
        factory.return_value.__aenter__ = AsyncMock(return_value=session)
        factory.return_value.__aexit__ = AsyncMock(return_value=False)
        return factory

    @pytest.mark.asyncio
    async def test_exit_does_not_commit(self):
        session = _mock_session()
        with patch("database.session.user_session_factory", self._factory(session)):
            gen = get_db_session()
            assert await gen.__anext__() is session
            with pytest.raises(StopAsyncIteration):
                await gen.__anext__()
        session.commit.assert_not_awaited()
        session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_rolls_back(self):
        session = _mock_session()
        with patch("database.session.user_session_factory", self._factory(session)):
            gen = get_db_session()
            await gen.__anext__()
            with pytest.raises(RuntimeError):
                await gen.athrow(RuntimeError("handler failed"))
        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()
