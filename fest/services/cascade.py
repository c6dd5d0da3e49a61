"""Cascade deletion of an entity together with every record it owns.

The store has no ON DELETE cascade, so removal is planned here: ids are captured
top-down from the root (one query per level, covering all sibling branches), then
rows are deleted bottom-up using those snapshots. Each level commits on its own, so
a failure leaves every level below the failure point empty and the rest intact;
calling ``delete_subtree`` again on the same root finishes the job.

Matches are always removed before the teams they reference.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fest.errors import NotFound, PartialDeletion
from fest.models import Association, Category, Event, Game, Match, Team, TeamMember

logger = logging.getLogger("fest.cascade")


class EntityKind(str, Enum):
    ASSOCIATION = "association"
    EVENT = "event"
    GAME = "game"
    CATEGORY = "category"
    TEAM = "team"


class CascadeState(str, Enum):
    CAPTURING_IDS = "capturing_ids"
    DELETING = "deleting"
    DONE = "done"
    PARTIAL_FAILURE = "partial_failure"


# Ownership chain, top-down: (kind, model, foreign key to the level above)
_CHAIN = [
    (EntityKind.ASSOCIATION, Association, None),
    (EntityKind.EVENT, Event, "association_id"),
    (EntityKind.GAME, Game, "event_id"),
    (EntityKind.CATEGORY, Category, "game_id"),
    (EntityKind.TEAM, Team, "category_id"),
]

# Deletion order, bottom-up
LEVELS = ("match", "team_member", "team", "category", "game", "event", "association")


@dataclass
class DeletionSummary:
    """Rows removed per level. ``state`` is DONE unless the cascade stopped partway."""

    root_kind: EntityKind
    root_id: int
    state: CascadeState = CascadeState.CAPTURING_IDS
    counts: dict[str, int] = field(default_factory=lambda: {level: 0 for level in LEVELS})
    completed_levels: list[str] = field(default_factory=list)
    failed_level: Optional[str] = None

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "root_kind": self.root_kind.value,
            "root_id": self.root_id,
            "state": self.state.value,
            "counts": dict(self.counts),
            "completed_levels": list(self.completed_levels),
            "failed_level": self.failed_level,
        }


def _chain_index(kind: EntityKind) -> int:
    for i, (k, _, _) in enumerate(_CHAIN):
        if k == kind:
            return i
    raise ValueError(f"Unsupported deletion root: {kind}")


async def _root_exists(session: AsyncSession, model, root_id: int) -> bool:
    # Query rather than session.get(): the identity map may still hold a row that an
    # earlier bulk delete removed.
    result = await session.execute(select(model.id).where(model.id == root_id))
    return result.scalar_one_or_none() is not None


async def capture_ids(session: AsyncSession, kind: EntityKind, root_id: int) -> dict[EntityKind, list[int]]:
    """Walk down from the root and snapshot the ids owned at each level."""
    start = _chain_index(kind)
    captured: dict[EntityKind, list[int]] = {kind: [root_id]}
    parent_ids = [root_id]
    for child_kind, model, fk in _CHAIN[start + 1 :]:
        if parent_ids:
            result = await session.execute(
                select(model.id).where(getattr(model, fk).in_(parent_ids)).order_by(model.id)
            )
            parent_ids = list(result.scalars().all())
        captured[child_kind] = parent_ids
    return captured


def _plan(kind: EntityKind, captured: dict[EntityKind, list[int]]) -> list[tuple[str, Any, Any]]:
    """Build (level, model, criterion) steps, bottom-up. Criterion is None for an empty level."""
    category_ids = captured.get(EntityKind.CATEGORY, [])
    team_ids = captured.get(EntityKind.TEAM, [])

    match_filters = []
    if category_ids:
        match_filters.append(Match.category_id.in_(category_ids))
    if team_ids:
        match_filters.append(Match.team1_id.in_(team_ids))
        match_filters.append(Match.team2_id.in_(team_ids))
        match_filters.append(Match.winner_team_id.in_(team_ids))

    steps: list[tuple[str, Any, Any]] = [
        ("match", Match, or_(*match_filters) if match_filters else None),
        ("team_member", TeamMember, TeamMember.team_id.in_(team_ids) if team_ids else None),
        ("team", Team, Team.id.in_(team_ids) if team_ids else None),
    ]
    for level_kind, model, _ in reversed(_CHAIN[: _chain_index(EntityKind.TEAM)]):
        if level_kind not in captured:
            continue
        ids = captured[level_kind]
        steps.append((level_kind.value, model, model.id.in_(ids) if ids else None))
    return steps


async def _delete_where(session: AsyncSession, model, criterion) -> int:
    result = await session.execute(delete(model).where(criterion))
    return result.rowcount or 0


async def delete_subtree(
    session: AsyncSession,
    kind: EntityKind,
    root_id: int,
    missing_ok: bool = False,
) -> DeletionSummary:
    """Delete ``root_id`` of ``kind`` and everything it owns.

    Raises NotFound when the root is absent, unless ``missing_ok`` is set, in which
    case an all-zero summary is returned (an already-finished delete). Raises
    PartialDeletion, carrying the summary so far, if a level fails; the failed level
    is rolled back and retrying on the same root is safe.
    """
    kind = EntityKind(kind)
    model = _CHAIN[_chain_index(kind)][1]
    summary = DeletionSummary(root_kind=kind, root_id=root_id)

    if not await _root_exists(session, model, root_id):
        if missing_ok:
            summary.state = CascadeState.DONE
            return summary
        raise NotFound(kind.value.title(), root_id)

    captured = await capture_ids(session, kind, root_id)
    steps = _plan(kind, captured)

    summary.state = CascadeState.DELETING
    for level, level_model, criterion in steps:
        if criterion is None:
            continue
        try:
            count = await _delete_where(session, level_model, criterion)
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            summary.state = CascadeState.PARTIAL_FAILURE
            summary.failed_level = level
            logger.exception("Cascade delete of %s %s failed at level %s", kind.value, root_id, level)
            raise PartialDeletion(
                f"Deleting {kind.value} {root_id} stopped at level '{level}'", summary
            ) from e
        summary.counts[level] = count
        summary.completed_levels.append(level)
        logger.info("Deleted %d %s row(s) under %s %s", count, level, kind.value, root_id)

    summary.state = CascadeState.DONE
    return summary
