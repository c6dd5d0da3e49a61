"""Category model - a priced bracket within a game."""
from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fest.models.base import Base


class Category(Base):
    """Competition bracket with an entry fee, run by one incharge user."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False, index=True)
    incharge_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    entry_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    game: Mapped["Game"] = relationship("Game", back_populates="categories")
    incharge: Mapped["User"] = relationship("User")
    teams = relationship("Team", back_populates="category", order_by="Team.id")
    matches = relationship("Match", back_populates="category", order_by="Match.id")
