"""Database models."""
from fest.models.base import Base, get_async_session, init_db
from fest.models.user import User
from fest.models.association import Association
from fest.models.event import Event
from fest.models.game import Game
from fest.models.category import Category
from fest.models.team import Team, TeamMember
from fest.models.match import Match

__all__ = [
    "Base",
    "User",
    "Association",
    "Event",
    "Game",
    "Category",
    "Team",
    "TeamMember",
    "Match",
    "get_async_session",
    "init_db",
]
