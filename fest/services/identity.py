"""Identity resolution: get-or-create of role-bound user accounts, password hashing."""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from fest.errors import Conflict, MissingCredential, ValidationError
from fest.models import User
from fest.models.user import ROLE_DEVELOPER, ROLES

logger = logging.getLogger("fest.identity")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Caller:
    """Authenticated caller as resolved by the web layer. Trusted as-is."""

    user_id: int
    role: str

    @property
    def is_developer(self) -> bool:
        return self.role == ROLE_DEVELOPER


def _prepare_password(password: str) -> str:
    """Bcrypt has a 72-byte limit. Pre-hash longer passwords with SHA256."""
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(_prepare_password(plain), hashed)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


def _reuse(user: User, role: str) -> User:
    if user.role != role:
        if config.ROLE_REUSE_POLICY == "reject":
            raise Conflict(f"{user.email} is already registered as {user.role}, not {role}")
        logger.info("Reusing %s account %s for %s; role left unchanged", user.role, user.email, role)
    return user


async def resolve_or_create(
    session: AsyncSession,
    email: Optional[str],
    role: str,
    name: Optional[str] = None,
    password: Optional[str] = None,
) -> User:
    """Return the account for ``email``, creating it with ``role`` if none exists.

    An existing account is returned as-is (its role is never rewritten; see
    ``config.ROLE_REUSE_POLICY``). Creating an account requires ``password``.

    The insert runs in a savepoint. If a concurrent request created the same email
    between the lookup and the insert, the unique index rejects ours and the winner's
    row is re-read and returned instead. The caller owns the outer commit.
    """
    email = normalize_email(email)
    if not email:
        raise ValidationError("Email is required")
    if role not in ROLES:
        raise ValidationError(f"Invalid role: {role}")

    user = await get_user_by_email(session, email)
    if user:
        return _reuse(user, role)

    if not password:
        raise MissingCredential(f"Password is required to create a new {role.title()} user")

    user = User(email=email, password_hash=hash_password(password), name=name, role=role)
    try:
        async with session.begin_nested():
            session.add(user)
    except IntegrityError:
        logger.warning("Account %s was created concurrently; re-reading", email)
        existing = await get_user_by_email(session, email)
        if existing is None:
            raise Conflict(f"Could not create account for {email}")
        return _reuse(existing, role)
    logger.info("Created %s account %s (id=%s)", role, email, user.id)
    return user
