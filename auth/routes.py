"""
Auth API routes — signup, signin, me.

Route prefix: /auth
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth.dependencies import get_auth_service, get_current_claims
from auth.jwt import SessionClaims
from auth.models import AuthResponse, MeResponse
from auth.service import AuthService

router = APIRouter(tags=["auth"])


# ── Request schemas ────────────────────────────────────────────────────
# Field policy (non-empty, password length) is enforced by AuthService so
# the client gets the policy message rather than a schema error.


class SignupRequest(BaseModel):
    email: str
    username: str
    password: str


class SigninRequest(BaseModel):
    email: str
    password: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user."""
    return await service.signup(req.email, req.username, req.password)


@router.post("/signin", response_model=AuthResponse)
async def signin(
    req: SigninRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Login with email + password."""
    return await service.signin(req.email, req.password)


@router.get("/me", response_model=MeResponse)
async def me(
    claims: SessionClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
) -> MeResponse:
    """Return the user the bearer token belongs to."""
    user = await service.current_user(claims)
    return MeResponse(user=user)
