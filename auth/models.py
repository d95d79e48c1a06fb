"""User shapes used by the auth flows.

``UserRecord`` is what a ``UserStore`` hands back and may carry the password
hash; ``UserResponse`` is the only shape that leaves the API.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserRecord(BaseModel):
    id: uuid.UUID
    email: str
    username: str
    password_hash: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def to_response(self) -> "UserResponse":
        return UserResponse(
            id=self.id,
            email=self.email,
            username=self.username,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class UserResponse(BaseModel):
    """User data returned to clients (no password hash)."""

    id: uuid.UUID
    email: str
    username: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


class MeResponse(BaseModel):
    user: UserResponse
