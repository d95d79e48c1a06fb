"""
UserStore: persistence contract consumed by the auth flows.

Implementations must enforce uniqueness of ``email`` and ``username``
atomically (e.g. unique indexes) and raise ``DuplicateUserError`` from
``create`` when either is taken.  ``AuthService`` pre-checks with
``exists`` but that check alone is racy under concurrent signups.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from auth.models import UserRecord


class UserStore(ABC):

    @abstractmethod
    async def exists(self, email: str, username: str) -> bool:
        """True if any user has this email or this username."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        """Look up a user by email, including ``password_hash``."""

    @abstractmethod
    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRecord]:
        """Look up a user by id.  ``password_hash`` is left unset."""

    @abstractmethod
    async def create(
        self,
        user_id: uuid.UUID,
        email: str,
        username: str,
        password_hash: str,
    ) -> UserRecord:
        """Insert a new user and return it (without ``password_hash``)."""
