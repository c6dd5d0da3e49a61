"""Game model - a sport within an event."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fest.models.base import Base


class Game(Base):
    """Sport grouping (e.g. Cricket) within an event."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)

    event: Mapped["Event"] = relationship("Event", back_populates="games")
    categories = relationship("Category", back_populates="game", order_by="Category.id")
