"""
``Authorization`` header parsing.
"""

from __future__ import annotations

from auth.errors import MalformedHeaderError

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header_value: str) -> str:
    """Return the token from ``Bearer <token>`` (prefix is case-sensitive)."""
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        raise MalformedHeaderError("authorization header is not a Bearer credential")
    token = header_value[len(BEARER_PREFIX):]
    if not token:
        raise MalformedHeaderError("bearer token is empty")
    return token
