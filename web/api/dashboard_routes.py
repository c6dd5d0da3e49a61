"""Read-only views: budget dashboard, leaderboards, public event tree."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from fest.models.base import async_session_factory
from fest.schemas import EventBudget, LeaderboardRow
from fest.services.budget import budget_for_scope
from fest.services.identity import Caller
from fest.services.leaderboard import leaderboard
from fest.services.provisioning import public_event_tree
from web.api.schemas import PublicEvent
from web.auth import require_manager

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard/budget", response_model=list[EventBudget])
async def get_budget_dashboard(
    event_id: Optional[list[int]] = Query(None),
    caller: Caller = Depends(require_manager),
):
    """Revenue and approved-team totals per event/game/category. Admins only see their own events."""
    async with async_session_factory() as session:
        return await budget_for_scope(session, caller, event_id)


@router.get("/leaderboard/{category_id}", response_model=list[LeaderboardRow])
async def get_leaderboard(category_id: int):
    """Wins per approved team in a category (public)."""
    async with async_session_factory() as session:
        return await leaderboard(session, category_id)


@router.get("/public/events", response_model=list[PublicEvent])
async def get_public_events():
    """Events with games and categories, for the team registration form."""
    async with async_session_factory() as session:
        return await public_event_tree(session)
