"""Pytest configuration and fixtures for engine and API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["INITIAL_DEVELOPER_EMAIL"] = "dev@fest.test"
os.environ["INITIAL_DEVELOPER_PASSWORD"] = "testpass123"
os.environ["ROLE_REUSE_POLICY"] = "reuse"

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fest.models import Association, Category, Event, Game, Match, Team, TeamMember, User
from fest.models.base import configure_sqlite, init_db
from fest.models.team import STATUS_APPROVED
from fest.models.user import ROLE_ADMIN, ROLE_INCHARGE
from web.api.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
async def _init_db():
    """Ensure database tables exist before each test (ASGI lifespan doesn't run with httpx)."""
    await init_db()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def dev_headers(client):
    """Login as the bootstrap developer and return Authorization headers."""
    r = await client.post(
        "/api/auth/login",
        json={"email": "dev@fest.test", "password": "testpass123"},
    )
    assert r.status_code == 200, f"Login failed: {r.text}"
    token = r.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def session():
    """Session on a private in-memory database with foreign keys enforced."""
    test_engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    configure_sqlite(test_engine)
    await init_db(test_engine)
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with factory() as s:
        yield s
    await test_engine.dispose()


@pytest.fixture
def count(session):
    """Row count for a model, optionally filtered."""

    async def _count(model, *where) -> int:
        query = select(func.count()).select_from(model)
        if where:
            query = query.where(*where)
        result = await session.execute(query)
        return result.scalar_one()

    return _count


class Factory:
    """Builds hierarchy rows directly through the session (no password hashing)."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._n = 0

    async def _add(self, obj):
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def user(self, role=ROLE_ADMIN, email=None):
        self._n += 1
        return await self._add(
            User(email=email or f"user{self._n}@fest.test", password_hash="not-a-hash", name=f"User {self._n}", role=role)
        )

    async def association(self, name="Sports Council"):
        return await self._add(Association(name=name))

    async def event(self, association, admin=None, name="Spring Fest"):
        admin = admin or await self.user(ROLE_ADMIN)
        return await self._add(
            Event(
                name=name,
                association_id=association.id,
                admin_id=admin.id,
                start_date=datetime(2026, 3, 1),
                end_date=datetime(2026, 3, 5),
                venue="Main Ground",
            )
        )

    async def game(self, event, name="Cricket"):
        return await self._add(Game(name=name, event_id=event.id))

    async def category(self, game, entry_fee=100.0, incharge=None, name="Open"):
        incharge = incharge or await self.user(ROLE_INCHARGE)
        return await self._add(Category(name=name, entry_fee=entry_fee, game_id=game.id, incharge_id=incharge.id))

    async def team(self, category, name="Team", status=STATUS_APPROVED, members=2):
        team = await self._add(Team(name=name, captain_name=f"{name} Captain", category_id=category.id, status=status))
        for i in range(members):
            await self._add(TeamMember(name=f"{name} Player {i + 1}", team_id=team.id))
        return team

    async def match(self, category, team1, team2, result=None, winner=None):
        return await self._add(
            Match(
                category_id=category.id,
                team1_id=team1.id if team1 else None,
                team2_id=team2.id if team2 else None,
                result=result,
                winner_team_id=winner.id if winner else None,
            )
        )


@pytest.fixture
def factory(session):
    return Factory(session)
