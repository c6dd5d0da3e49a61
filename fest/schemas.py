"""Output records returned by the engine services."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class CategoryBudget(BaseModel):
    id: int
    name: str
    entry_fee: float
    incharge_email: Optional[str] = None
    approved_teams_count: int = 0
    revenue: float = 0.0


class GameBudget(BaseModel):
    id: int
    name: str
    total_teams: int = 0
    revenue: float = 0.0
    categories: list[CategoryBudget] = []


class EventBudget(BaseModel):
    id: int
    name: str
    total_teams: int = 0
    total_revenue: float = 0.0
    games: list[GameBudget] = []


class LeaderboardRow(BaseModel):
    team_id: int
    name: str
    wins: int = 0
