"""Event model - a tournament instance run by one admin."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fest.models.base import Base


class Event(Base):
    """Tournament with a date range and venue, owned by an association."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    association_id: Mapped[int] = mapped_column(ForeignKey("associations.id"), nullable=False, index=True)
    admin_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    venue: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    association: Mapped["Association"] = relationship("Association", back_populates="events")
    admin: Mapped["User"] = relationship("User")
    games = relationship("Game", back_populates="event", order_by="Game.id")
