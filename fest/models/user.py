"""User accounts that administer events and categories."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fest.models.base import Base

ROLE_DEVELOPER = "DEVELOPER"
ROLE_ADMIN = "ADMIN"
ROLE_INCHARGE = "INCHARGE"
ROLES = (ROLE_DEVELOPER, ROLE_ADMIN, ROLE_INCHARGE)


class User(Base):
    """Account with a single role. Email is the login and is globally unique."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False)  # DEVELOPER, ADMIN, INCHARGE
