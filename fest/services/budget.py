"""Revenue and team-count roll-up through Event -> Game -> Category."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fest.models import Category, Event, Game, Team
from fest.models.team import STATUS_APPROVED
from fest.schemas import CategoryBudget, EventBudget, GameBudget
from fest.services.identity import Caller

logger = logging.getLogger("fest.budget")


async def approved_team_counts(session: AsyncSession, category_ids: list[int]) -> dict[int, int]:
    """Number of APPROVED teams per category. Categories with none are absent from the dict."""
    if not category_ids:
        return {}
    result = await session.execute(
        select(Team.category_id, func.count(Team.id))
        .where(Team.category_id.in_(category_ids), Team.status == STATUS_APPROVED)
        .group_by(Team.category_id)
    )
    return {category_id: count for category_id, count in result.all()}


def _category_budget(category: Category, approved: int) -> CategoryBudget:
    return CategoryBudget(
        id=category.id,
        name=category.name,
        entry_fee=category.entry_fee,
        incharge_email=category.incharge.email if category.incharge else None,
        approved_teams_count=approved,
        revenue=approved * category.entry_fee,
    )


async def budget_for_scope(
    session: AsyncSession,
    caller: Caller,
    event_ids: Optional[Iterable[int]] = None,
) -> list[EventBudget]:
    """Budget tree for every event the caller may see.

    Developers see all events; anyone else only the events they administer. The
    scope and the optional ``event_ids`` filter are part of the query, so events
    outside them are never loaded. Every category appears, zero-revenue ones included.
    """
    query = (
        select(Event)
        .options(
            selectinload(Event.games)
            .selectinload(Game.categories)
            .selectinload(Category.incharge)
        )
        .order_by(Event.id)
    )
    if not caller.is_developer:
        query = query.where(Event.admin_id == caller.user_id)
    if event_ids is not None:
        wanted = set(event_ids)
        if not wanted:
            return []
        query = query.where(Event.id.in_(wanted))
    events = (await session.execute(query)).scalars().all()

    category_ids = [c.id for e in events for g in e.games for c in g.categories]
    approved = await approved_team_counts(session, category_ids)

    budgets = []
    for event in events:
        games = []
        for game in event.games:
            categories = [_category_budget(c, approved.get(c.id, 0)) for c in game.categories]
            games.append(
                GameBudget(
                    id=game.id,
                    name=game.name,
                    total_teams=sum(c.approved_teams_count for c in categories),
                    revenue=sum(c.revenue for c in categories),
                    categories=categories,
                )
            )
        budgets.append(
            EventBudget(
                id=event.id,
                name=event.name,
                total_teams=sum(g.total_teams for g in games),
                total_revenue=sum(g.revenue for g in games),
                games=games,
            )
        )
    logger.debug("Budget for user %s (%s): %d event(s)", caller.user_id, caller.role, len(budgets))
    return budgets
