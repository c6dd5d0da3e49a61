"""Auth API routes: login, current user."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

import config
from fest.models import User
from fest.models.base import async_session_factory
from fest.models.user import ROLE_DEVELOPER
from fest.services.identity import get_user_by_email, normalize_email, resolve_or_create, verify_password
from web.auth import create_access_token, get_current_user, require_user

logger = logging.getLogger("fest.web")

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: int
    name: Optional[str]
    email: str
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


def _user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email, role=user.role)


def _is_bootstrap_login(body: LoginRequest) -> bool:
    return bool(
        config.INITIAL_DEVELOPER_PASSWORD
        and normalize_email(body.email) == normalize_email(config.INITIAL_DEVELOPER_EMAIL)
        and body.password == config.INITIAL_DEVELOPER_PASSWORD
    )


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    """Authenticate and return JWT."""
    async with async_session_factory() as session:
        user = await get_user_by_email(session, body.email)
        if not user:
            # Bootstrap: if INITIAL_DEVELOPER_PASSWORD is set and matches, create the developer
            if not _is_bootstrap_login(body):
                raise HTTPException(status_code=401, detail="Invalid credentials")
            user = await resolve_or_create(
                session, body.email, ROLE_DEVELOPER, config.INITIAL_DEVELOPER_NAME, body.password
            )
            await session.commit()
            logger.info("Bootstrapped developer account %s", user.email)
        elif not verify_password(body.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid credentials")
        token = create_access_token(user.id, user.role)
        return LoginResponse(access_token=token, user=_user_response(user))


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(require_user)):
    """Get current authenticated user."""
    return _user_response(user)


@router.get("/me/optional")
async def get_me_optional(user: Optional[User] = Depends(get_current_user)):
    """Get current user if logged in, else null. For frontend auth check."""
    if not user:
        return None
    return _user_response(user)
