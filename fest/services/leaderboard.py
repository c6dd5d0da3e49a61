"""Category standings: wins per approved team, recomputed on every call."""
from __future__ import annotations

from typing import NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fest.errors import NotFound, ValidationError
from fest.models import Category, Match, Team
from fest.models.team import STATUS_APPROVED
from fest.schemas import LeaderboardRow

TEAM1_WON = "Team1 Won"
TEAM2_WON = "Team2 Won"
DRAW = "DRAW"


class MatchOutcome(NamedTuple):
    winner_team_id: Optional[int]
    is_draw: bool


def decode_result(result: str, team1_id: Optional[int], team2_id: Optional[int]) -> MatchOutcome:
    """Turn a result label into a winner.

    The label names a side either by team id or by the literal "Team1 Won" /
    "Team2 Won"; "DRAW" is a draw. Exactly one side must match, and that side must
    have a team assigned.
    """
    label = (result or "").strip()
    if label.upper() == DRAW:
        return MatchOutcome(None, True)
    team1 = team1_id is not None and label in (str(team1_id), TEAM1_WON)
    team2 = team2_id is not None and label in (str(team2_id), TEAM2_WON)
    if team1 == team2:
        raise ValidationError(f"Result '{label}' does not identify exactly one team of this match")
    return MatchOutcome(team1_id if team1 else team2_id, False)


async def leaderboard(session: AsyncSession, category_id: int) -> list[LeaderboardRow]:
    """Approved teams of the category ranked by wins.

    Teams without wins are listed with 0. A win only counts for a team that is still
    approved. Ties are ordered by team name, then id.
    """
    category = await session.get(Category, category_id)
    if not category:
        raise NotFound("Category", category_id)

    teams = await session.execute(
        select(Team)
        .where(Team.category_id == category_id, Team.status == STATUS_APPROVED)
        .order_by(Team.id)
    )
    rows = {t.id: LeaderboardRow(team_id=t.id, name=t.name) for t in teams.scalars().all()}
    if not rows:
        return []

    winners = await session.execute(
        select(Match.winner_team_id).where(
            Match.category_id == category_id,
            Match.result.is_not(None),
            Match.winner_team_id.is_not(None),
        )
    )
    for winner_id in winners.scalars().all():
        row = rows.get(winner_id)
        if row:
            row.wins += 1

    return sorted(rows.values(), key=lambda r: (-r.wins, r.name, r.team_id))
