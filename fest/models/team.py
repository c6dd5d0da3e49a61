"""Team and team member models."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fest.models.base import Base

STATUS_PENDING = "PENDING"
STATUS_APPROVED = "APPROVED"
STATUS_REJECTED = "REJECTED"
TEAM_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


class Team(Base):
    """Registered team in a category. Only APPROVED teams count for revenue and standings."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    captain_name: Mapped[str] = mapped_column(String(128), nullable=False)
    branch: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    year: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING)  # PENDING, APPROVED, REJECTED
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    category: Mapped["Category"] = relationship("Category", back_populates="teams")
    members = relationship("TeamMember", back_populates="team", order_by="TeamMember.id")


class TeamMember(Base):
    """Individual participant on a team."""

    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    branch: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    year: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    team: Mapped["Team"] = relationship("Team", back_populates="members")
