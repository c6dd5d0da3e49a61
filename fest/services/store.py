"""Small helpers shared by the services for reading and committing."""
from __future__ import annotations

from typing import Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fest.errors import Conflict, NotFound, ValidationError

T = TypeVar("T")


async def get_or_raise(session: AsyncSession, model: type[T], entity_id: int, kind: Optional[str] = None) -> T:
    obj = await session.get(model, entity_id)
    if obj is None:
        raise NotFound(kind or model.__name__, entity_id)
    return obj


async def commit(session: AsyncSession, what: str) -> None:
    """Commit, turning a constraint violation into Conflict."""
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise Conflict(f"{what} conflicts with existing data") from e


def require_name(value: Optional[str], field: str = "name") -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value
