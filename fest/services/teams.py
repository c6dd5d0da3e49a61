"""Team registration and the approval workflow."""
from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fest.errors import NotFound, ValidationError
from fest.models import Category, Team, TeamMember
from fest.models.team import STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED, TEAM_STATUSES
from fest.services.store import commit, get_or_raise, require_name

# Allowed status changes: PENDING is the only state a team can leave.
TRANSITIONS = {
    STATUS_PENDING: (STATUS_APPROVED, STATUS_REJECTED),
    STATUS_APPROVED: (),
    STATUS_REJECTED: (),
}


def _load_team():
    return select(Team).options(
        selectinload(Team.members),
        selectinload(Team.category).selectinload(Category.game),
    )


async def get_team(session: AsyncSession, team_id: int) -> Team:
    result = await session.execute(
        _load_team().where(Team.id == team_id).execution_options(populate_existing=True)
    )
    team = result.scalar_one_or_none()
    if not team:
        raise NotFound("Team", team_id)
    return team


async def register_team(
    session: AsyncSession,
    category_id: int,
    name: str,
    captain_name: str,
    branch: Optional[str] = None,
    year: Optional[str] = None,
    members: Iterable[dict] = (),
) -> Team:
    """Register a team and its members. New teams start PENDING."""
    await get_or_raise(session, Category, category_id)
    name = require_name(name)
    captain_name = require_name(captain_name, "captain_name")
    roster = [
        TeamMember(name=require_name(m.get("name"), "member name"), branch=m.get("branch"), year=m.get("year"))
        for m in members
    ]
    team = Team(
        category_id=category_id,
        name=name,
        captain_name=captain_name,
        branch=branch,
        year=year,
        status=STATUS_PENDING,
        members=roster,
    )
    session.add(team)
    await commit(session, "Team")
    return await get_team(session, team.id)


async def set_team_status(session: AsyncSession, team_id: int, status: str) -> Team:
    """Approve or reject a pending team."""
    if status not in TEAM_STATUSES:
        raise ValidationError(f"Invalid status: {status}")
    team = await get_or_raise(session, Team, team_id)
    if status not in TRANSITIONS[team.status]:
        raise ValidationError(f"Team status cannot change from {team.status} to {status}")
    team.status = status
    await commit(session, "Team")
    return await get_team(session, team_id)


async def list_teams(session: AsyncSession, category_id: Optional[int] = None) -> list[Team]:
    query = _load_team().order_by(Team.id)
    if category_id is not None:
        query = query.where(Team.category_id == category_id)
    result = await session.execute(query)
    return list(result.scalars().all())


async def delete_team_member(session: AsyncSession, member_id: int) -> None:
    member = await get_or_raise(session, TeamMember, member_id, "Team member")
    await session.delete(member)
    await commit(session, "Team member")
