"""API routes for the association -> event -> game -> category -> team/match hierarchy."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from fest.models.base import async_session_factory
from fest.services import matches, provisioning, teams
from fest.services.cascade import EntityKind, delete_subtree
from fest.services.identity import Caller
from web.api.schemas import (
    AssociationCreate,
    AssociationDetail,
    AssociationResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    EventCreate,
    EventDetail,
    EventResponse,
    EventUpdate,
    GameCreate,
    GameDetail,
    GameResponse,
    GameUpdate,
    MatchCreate,
    MatchResponse,
    MatchResultUpdate,
    MatchUpdate,
    TeamRegister,
    TeamResponse,
    TeamStatusUpdate,
)
from web.auth import require_developer, require_manager, require_staff

router = APIRouter(prefix="/api", tags=["hierarchy"])


async def _cascade(kind: EntityKind, entity_id: int, missing_ok: bool = False) -> dict:
    async with async_session_factory() as session:
        summary = await delete_subtree(session, kind, entity_id, missing_ok=missing_ok)
        return summary.as_dict()


# --- Associations ---


@router.post("/associations", status_code=201, response_model=AssociationResponse)
async def create_association(body: AssociationCreate, caller: Caller = Depends(require_developer)):
    async with async_session_factory() as session:
        return await provisioning.create_association(session, body.name, caller.user_id)


@router.get("/associations", response_model=list[AssociationDetail])
async def list_associations(caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await provisioning.list_associations(session)


@router.put("/associations/{association_id}", response_model=AssociationResponse)
async def update_association(association_id: int, body: AssociationCreate, caller: Caller = Depends(require_developer)):
    async with async_session_factory() as session:
        return await provisioning.update_association(session, association_id, body.name)


@router.delete("/associations/{association_id}")
async def delete_association(association_id: int, missing_ok: bool = False, caller: Caller = Depends(require_developer)):
    """Delete an association with all its events, games, categories, teams and matches."""
    return await _cascade(EntityKind.ASSOCIATION, association_id, missing_ok)


# --- Events ---


@router.post("/events", status_code=201, response_model=EventResponse)
async def create_event(body: EventCreate, caller: Caller = Depends(require_manager)):
    """Create an event. Developers must name the admin (created if the email is new)."""
    async with async_session_factory() as session:
        return await provisioning.create_event(
            session,
            caller,
            name=body.name,
            start_date=body.start_date,
            end_date=body.end_date,
            association_id=body.association_id,
            venue=body.venue,
            admin_email=body.admin_email,
            admin_name=body.admin_name,
            admin_password=body.admin_password,
        )


@router.get("/events", response_model=list[EventDetail])
async def list_events(caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await provisioning.list_events(session)


@router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(event_id: int, body: EventUpdate, caller: Caller = Depends(require_manager)):
    async with async_session_factory() as session:
        return await provisioning.update_event(session, event_id, **body.model_dump(exclude_unset=True))


@router.delete("/events/{event_id}")
async def delete_event(event_id: int, missing_ok: bool = False, caller: Caller = Depends(require_manager)):
    return await _cascade(EntityKind.EVENT, event_id, missing_ok)


# --- Games ---


@router.post("/games", status_code=201, response_model=GameResponse)
async def create_game(body: GameCreate, caller: Caller = Depends(require_manager)):
    async with async_session_factory() as session:
        return await provisioning.create_game(session, body.name, body.event_id)


@router.get("/games", response_model=list[GameDetail])
async def list_games(event_id: Optional[int] = None, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await provisioning.list_games(session, event_id)


@router.put("/games/{game_id}", response_model=GameResponse)
async def update_game(game_id: int, body: GameUpdate, caller: Caller = Depends(require_manager)):
    async with async_session_factory() as session:
        return await provisioning.update_game(session, game_id, body.name)


@router.delete("/games/{game_id}")
async def delete_game(game_id: int, missing_ok: bool = False, caller: Caller = Depends(require_manager)):
    return await _cascade(EntityKind.GAME, game_id, missing_ok)


# --- Categories ---


@router.post("/categories", status_code=201, response_model=CategoryResponse)
async def create_category(body: CategoryCreate, caller: Caller = Depends(require_manager)):
    """Create a category. The incharge is reused by email, or created (password required)."""
    async with async_session_factory() as session:
        return await provisioning.create_category(
            session,
            name=body.name,
            entry_fee=body.entry_fee,
            game_id=body.game_id,
            incharge_email=body.incharge_email,
            incharge_name=body.incharge_name,
            incharge_password=body.incharge_password,
        )


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(game_id: Optional[int] = None, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await provisioning.list_categories(session, game_id)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: int, body: CategoryUpdate, caller: Caller = Depends(require_manager)):
    async with async_session_factory() as session:
        return await provisioning.update_category(session, category_id, **body.model_dump(exclude_unset=True))


@router.delete("/categories/{category_id}")
async def delete_category(category_id: int, missing_ok: bool = False, caller: Caller = Depends(require_manager)):
    """Delete a category with its teams, members and matches."""
    return await _cascade(EntityKind.CATEGORY, category_id, missing_ok)


# --- Teams ---


@router.post("/teams/register", status_code=201)
async def register_team(body: TeamRegister):
    """Public team registration. Teams start PENDING until an incharge approves them."""
    async with async_session_factory() as session:
        team = await teams.register_team(
            session,
            category_id=body.category_id,
            name=body.name,
            captain_name=body.captain_name,
            branch=body.branch,
            year=body.year,
            members=[m.model_dump() for m in body.members],
        )
        return {
            "message": "Team registered successfully, pending approval",
            "team": TeamResponse.model_validate(team),
        }


@router.get("/teams", response_model=list[TeamResponse])
async def list_teams(category_id: Optional[int] = None, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await teams.list_teams(session, category_id)


@router.patch("/teams/{team_id}/status", response_model=TeamResponse)
async def update_team_status(team_id: int, body: TeamStatusUpdate, caller: Caller = Depends(require_staff)):
    """Approve or reject a pending team."""
    async with async_session_factory() as session:
        return await teams.set_team_status(session, team_id, body.status)


@router.delete("/teams/{team_id}")
async def delete_team(team_id: int, missing_ok: bool = False, caller: Caller = Depends(require_staff)):
    """Delete a team with its members and every match it played."""
    return await _cascade(EntityKind.TEAM, team_id, missing_ok)


@router.delete("/team-members/{member_id}")
async def delete_team_member(member_id: int, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        await teams.delete_team_member(session, member_id)
        return {"ok": True}


# --- Matches ---


@router.post("/matches", status_code=201, response_model=MatchResponse)
async def schedule_match(body: MatchCreate, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await matches.schedule_match(
            session, body.category_id, body.team1_id, body.team2_id, body.scheduled_time
        )


@router.get("/matches", response_model=list[MatchResponse])
async def list_matches(category_id: Optional[int] = None):
    """Match schedule (public)."""
    async with async_session_factory() as session:
        return await matches.list_matches(session, category_id)


@router.put("/matches/{match_id}", response_model=MatchResponse)
async def update_match(match_id: int, body: MatchUpdate, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await matches.update_match(session, match_id, **body.model_dump(exclude_unset=True))


@router.patch("/matches/{match_id}/result", response_model=MatchResponse)
async def record_match_result(match_id: int, body: MatchResultUpdate, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        return await matches.record_result(session, match_id, body.result, body.score_data)


@router.delete("/matches/{match_id}")
async def delete_match(match_id: int, caller: Caller = Depends(require_staff)):
    async with async_session_factory() as session:
        await matches.delete_match(session, match_id)
        return {"ok": True}
