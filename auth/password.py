"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt only reads the first 72
bytes of its input; longer passwords are truncated to that prefix before
hashing and verifying, so they behave the same on every bcrypt release.
"""

from __future__ import annotations

import bcrypt

from auth.errors import ConfigurationError, HashingError

BCRYPT_MAX_PASSWORD_BYTES = 72
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
_MIN_ROUNDS = 4
_MAX_ROUNDS = 31


def _password_bytes(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """bcrypt hasher with a fixed work factor."""

    def __init__(self, rounds: int = 12) -> None:
        if not _MIN_ROUNDS <= rounds <= _MAX_ROUNDS:
            raise ConfigurationError(
                f"bcrypt rounds must be between {_MIN_ROUNDS} and {_MAX_ROUNDS}, got {rounds}"
            )
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=rounds))

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted, one salt per call)."""
        try:
            return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=self.rounds)).decode()
        except (ValueError, TypeError) as exc:
            raise HashingError() from exc

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Constant-time comparison against a bcrypt hash.

        A damaged bcrypt hash yields ``False``; a string that is not
        bcrypt-encoded at all raises ``HashingError``.
        """
        if not isinstance(password_hash, str) or not password_hash.startswith(_BCRYPT_PREFIXES):
            raise HashingError("Unrecognized password hash format")
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode())
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, password: str) -> bool:
        """Spend one verify's worth of work and return ``False``."""
        try:
            bcrypt.checkpw(_password_bytes(password), self._dummy_hash)
        except (ValueError, TypeError):
            pass
        return False
