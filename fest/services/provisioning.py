"""Create/update/read for associations, events, games and categories."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fest.errors import ValidationError
from fest.models import Association, Category, Event, Game
from fest.models.user import ROLE_ADMIN, ROLE_INCHARGE
from fest.services.identity import Caller, resolve_or_create
from fest.services.store import commit, get_or_raise, require_name


def validate_entry_fee(value: Any) -> float:
    try:
        fee = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid entry fee: {value!r}")
    if not math.isfinite(fee) or fee < 0:
        raise ValidationError("Entry fee must be a non-negative number")
    return fee


def _check_dates(start_date: datetime, end_date: datetime) -> None:
    if end_date < start_date:
        raise ValidationError("Event cannot end before it starts")


# --- Associations ---


async def create_association(session: AsyncSession, name: str, created_by_id: Optional[int] = None) -> Association:
    association = Association(name=require_name(name), created_by_id=created_by_id)
    session.add(association)
    await commit(session, "Association")
    await session.refresh(association)
    return association


async def update_association(session: AsyncSession, association_id: int, name: str) -> Association:
    association = await get_or_raise(session, Association, association_id)
    association.name = require_name(name)
    await commit(session, "Association")
    await session.refresh(association)
    return association


async def list_associations(session: AsyncSession) -> list[Association]:
    result = await session.execute(
        select(Association)
        .options(selectinload(Association.events), selectinload(Association.created_by))
        .order_by(Association.id)
    )
    return list(result.scalars().all())


# --- Events ---


async def create_event(
    session: AsyncSession,
    caller: Caller,
    name: str,
    start_date: datetime,
    end_date: datetime,
    association_id: int,
    venue: Optional[str] = None,
    admin_email: Optional[str] = None,
    admin_name: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> Event:
    """Create an event. A developer names the admin by email (created if new);
    an admin creating an event becomes its admin."""
    name = require_name(name)
    _check_dates(start_date, end_date)
    await get_or_raise(session, Association, association_id)
    if caller.is_developer:
        if not admin_email:
            raise ValidationError("Admin email required")
        admin = await resolve_or_create(session, admin_email, ROLE_ADMIN, admin_name, admin_password)
        admin_id = admin.id
    else:
        admin_id = caller.user_id
    event = Event(
        name=name,
        start_date=start_date,
        end_date=end_date,
        venue=venue,
        association_id=association_id,
        admin_id=admin_id,
    )
    session.add(event)
    await commit(session, "Event")
    await session.refresh(event)
    return event


async def update_event(
    session: AsyncSession,
    event_id: int,
    name: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    venue: Optional[str] = None,
) -> Event:
    event = await get_or_raise(session, Event, event_id)
    if name is not None:
        event.name = require_name(name)
    new_start = start_date or event.start_date
    new_end = end_date or event.end_date
    _check_dates(new_start, new_end)
    event.start_date, event.end_date = new_start, new_end
    if venue is not None:
        event.venue = venue
    await commit(session, "Event")
    await session.refresh(event)
    return event


async def list_events(session: AsyncSession) -> list[Event]:
    result = await session.execute(
        select(Event)
        .options(selectinload(Event.association), selectinload(Event.admin))
        .order_by(Event.start_date, Event.id)
    )
    return list(result.scalars().all())


async def public_event_tree(session: AsyncSession) -> list[Event]:
    """Events with their games and categories, for the public registration form."""
    result = await session.execute(
        select(Event)
        .options(selectinload(Event.games).selectinload(Game.categories))
        .order_by(Event.start_date, Event.id)
    )
    return list(result.scalars().all())


# --- Games ---


async def create_game(session: AsyncSession, name: str, event_id: int) -> Game:
    await get_or_raise(session, Event, event_id)
    game = Game(name=require_name(name), event_id=event_id)
    session.add(game)
    await commit(session, "Game")
    await session.refresh(game)
    return game


async def update_game(session: AsyncSession, game_id: int, name: str) -> Game:
    game = await get_or_raise(session, Game, game_id)
    game.name = require_name(name)
    await commit(session, "Game")
    await session.refresh(game)
    return game


async def list_games(session: AsyncSession, event_id: Optional[int] = None) -> list[Game]:
    query = select(Game).options(selectinload(Game.categories)).order_by(Game.id)
    if event_id is not None:
        query = query.where(Game.event_id == event_id)
    result = await session.execute(query)
    return list(result.scalars().all())


# --- Categories ---


async def _load_category(session: AsyncSession, category_id: int) -> Category:
    result = await session.execute(
        select(Category)
        .where(Category.id == category_id)
        .options(selectinload(Category.incharge))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def create_category(
    session: AsyncSession,
    name: str,
    entry_fee: Any,
    game_id: int,
    incharge_email: str,
    incharge_name: Optional[str] = None,
    incharge_password: Optional[str] = None,
) -> Category:
    """Create a priced category. The incharge account is reused by email or created."""
    fee = validate_entry_fee(entry_fee)
    name = require_name(name)
    await get_or_raise(session, Game, game_id)
    incharge = await resolve_or_create(session, incharge_email, ROLE_INCHARGE, incharge_name, incharge_password)
    category = Category(name=name, entry_fee=fee, game_id=game_id, incharge_id=incharge.id)
    session.add(category)
    await commit(session, "Category")
    return await _load_category(session, category.id)


async def update_category(
    session: AsyncSession,
    category_id: int,
    name: Optional[str] = None,
    entry_fee: Any = None,
    incharge_email: Optional[str] = None,
    incharge_name: Optional[str] = None,
    incharge_password: Optional[str] = None,
) -> Category:
    """Edit a category. A different incharge email switches (or creates) the incharge."""
    await get_or_raise(session, Category, category_id)
    category = await _load_category(session, category_id)
    if name is not None:
        category.name = require_name(name)
    if entry_fee is not None:
        category.entry_fee = validate_entry_fee(entry_fee)
    if incharge_email and incharge_email.strip().lower() != category.incharge.email:
        incharge = await resolve_or_create(session, incharge_email, ROLE_INCHARGE, incharge_name, incharge_password)
        category.incharge_id = incharge.id
    await commit(session, "Category")
    return await _load_category(session, category_id)


async def list_categories(session: AsyncSession, game_id: Optional[int] = None) -> list[Category]:
    query = select(Category).options(selectinload(Category.incharge)).order_by(Category.id)
    if game_id is not None:
        query = query.where(Category.game_id == game_id)
    result = await session.execute(query)
    return list(result.scalars().all())
