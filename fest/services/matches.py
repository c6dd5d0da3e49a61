"""Match scheduling and result recording."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fest.errors import NotFound, ValidationError
from fest.models import Category, Match, Team
from fest.services.leaderboard import decode_result
from fest.services.store import commit, get_or_raise

_UNSET: Any = object()


async def _check_teams(
    session: AsyncSession, category_id: int, team1_id: Optional[int], team2_id: Optional[int]
) -> None:
    if team1_id is not None and team1_id == team2_id:
        raise ValidationError("A team cannot play itself")
    for team_id in (team1_id, team2_id):
        if team_id is None:
            continue
        team = await session.get(Team, team_id)
        if not team:
            raise NotFound("Team", team_id)
        if team.category_id != category_id:
            raise ValidationError(f"Team {team_id} is not in category {category_id}")


def _load_match():
    return select(Match).options(
        selectinload(Match.team1),
        selectinload(Match.team2),
        selectinload(Match.category).selectinload(Category.game),
    )


async def get_match(session: AsyncSession, match_id: int) -> Match:
    result = await session.execute(
        _load_match().where(Match.id == match_id).execution_options(populate_existing=True)
    )
    match = result.scalar_one_or_none()
    if not match:
        raise NotFound("Match", match_id)
    return match


async def schedule_match(
    session: AsyncSession,
    category_id: int,
    team1_id: Optional[int],
    team2_id: Optional[int],
    scheduled_time: Optional[datetime] = None,
) -> Match:
    await get_or_raise(session, Category, category_id)
    await _check_teams(session, category_id, team1_id, team2_id)
    match = Match(
        category_id=category_id,
        team1_id=team1_id,
        team2_id=team2_id,
        scheduled_time=scheduled_time,
    )
    session.add(match)
    await commit(session, "Match")
    return await get_match(session, match.id)


async def update_match(
    session: AsyncSession,
    match_id: int,
    team1_id: Optional[int] = _UNSET,
    team2_id: Optional[int] = _UNSET,
    scheduled_time: Optional[datetime] = _UNSET,
) -> Match:
    """Reassign teams or reschedule.

    A recorded winner stays the winner: it must remain one of the two teams, and its
    label is rewritten to the team id so a side swap cannot move the win.
    """
    match = await get_or_raise(session, Match, match_id)
    new_team1 = match.team1_id if team1_id is _UNSET else team1_id
    new_team2 = match.team2_id if team2_id is _UNSET else team2_id
    await _check_teams(session, match.category_id, new_team1, new_team2)
    if match.result is not None and (new_team1, new_team2) != (match.team1_id, match.team2_id):
        if not match.is_draw:
            if match.winner_team_id not in (new_team1, new_team2):
                raise ValidationError("Clear the result before removing the winning team")
            match.result = str(match.winner_team_id)
    match.team1_id, match.team2_id = new_team1, new_team2
    if scheduled_time is not _UNSET:
        match.scheduled_time = scheduled_time
    await commit(session, "Match")
    return await get_match(session, match_id)


async def record_result(
    session: AsyncSession,
    match_id: int,
    result: Optional[str],
    score_data: Any = None,
) -> Match:
    """Store a result label and the winner it names. ``result=None`` clears the result."""
    match = await get_or_raise(session, Match, match_id)
    if result is None:
        match.result = None
        match.winner_team_id = None
        match.is_draw = False
    else:
        outcome = decode_result(result, match.team1_id, match.team2_id)
        match.result = result.strip()
        match.winner_team_id, match.is_draw = outcome
    match.score_data = score_data
    await commit(session, "Match")
    return await get_match(session, match_id)


async def list_matches(session: AsyncSession, category_id: Optional[int] = None) -> list[Match]:
    query = _load_match().order_by(Match.scheduled_time, Match.id)
    if category_id is not None:
        query = query.where(Match.category_id == category_id)
    result = await session.execute(query)
    return list(result.scalars().all())


async def delete_match(session: AsyncSession, match_id: int) -> None:
    match = await get_or_raise(session, Match, match_id)
    await session.delete(match)
    await commit(session, "Match")
