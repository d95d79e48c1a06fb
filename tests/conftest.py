"""
Shared fixtures: fixed-secret codec with a controllable clock, a cheap
bcrypt hasher, an in-memory ``UserStore`` and an httpx client bound to the
ASGI app.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx
import pytest
import pytest_asyncio

from auth.dependencies import get_user_store
from auth.errors import DuplicateUserError
from auth.gateway import AuthGateway
from auth.jwt import TokenCodec
from auth.models import UserRecord
from auth.password import PasswordHasher
from auth.store import UserStore
from config.settings import Settings
from main import create_app

TEST_SECRET = "test-signing-secret-0123456789abcdef"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryUserStore(UserStore):
    def __init__(self) -> None:
        self.users: Dict[uuid.UUID, UserRecord] = {}

    async def exists(self, email: str, username: str) -> bool:
        return any(u.email == email or u.username == username for u in self.users.values())

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRecord]:
        user = self.users.get(user_id)
        return user.model_copy(update={"password_hash": None}) if user else None

    async def create(self, user_id, email, username, password_hash) -> UserRecord:
        # Checks the data directly so a stale exists() answer cannot bypass it.
        if any(u.email == email or u.username == username for u in self.users.values()):
            raise DuplicateUserError()
        now = datetime.now(timezone.utc)
        record = UserRecord(
            id=user_id,
            email=email,
            username=username,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users[user_id] = record
        return record.model_copy(update={"password_hash": None})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def codec(clock) -> TokenCodec:
    return TokenCodec(secret=TEST_SECRET, clock=clock)


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def app(settings, codec, hasher, store):
    app = create_app(settings)
    app.state.token_codec = codec
    app.state.auth_gateway = AuthGateway(codec)
    app.state.password_hasher = hasher
    app.dependency_overrides[get_user_store] = lambda: store
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
