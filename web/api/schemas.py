"""Request and response models for the API."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _coerce_str(v):
    """Accept numbers for free-text fields like year (forms send them either way)."""
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (int, float)):
        return str(v)
    return v


# --- Responses ---


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserBrief(ORMModel):
    id: int
    name: Optional[str]
    email: str


class AssociationResponse(ORMModel):
    id: int
    name: str
    created_by_id: Optional[int]


class EventResponse(ORMModel):
    id: int
    name: str
    start_date: datetime
    end_date: datetime
    venue: Optional[str]
    association_id: int
    admin_id: int


class AssociationDetail(AssociationResponse):
    created_by: Optional[UserBrief] = None
    events: list[EventResponse] = []


class EventDetail(EventResponse):
    association: AssociationResponse
    admin: Optional[UserBrief] = None


class CategoryBrief(ORMModel):
    id: int
    name: str
    entry_fee: float
    game_id: int
    incharge_id: int


class CategoryResponse(CategoryBrief):
    incharge: Optional[UserBrief] = None


class GameResponse(ORMModel):
    id: int
    name: str
    event_id: int


class GameDetail(GameResponse):
    categories: list[CategoryBrief] = []


class PublicEvent(EventResponse):
    games: list[GameDetail] = []


class TeamMemberResponse(ORMModel):
    id: int
    name: str
    branch: Optional[str]
    year: Optional[str]


class TeamResponse(ORMModel):
    id: int
    name: str
    captain_name: str
    branch: Optional[str]
    year: Optional[str]
    status: str
    category_id: int
    members: list[TeamMemberResponse] = []


class TeamBrief(ORMModel):
    id: int
    name: str
    branch: Optional[str]


class MatchResponse(ORMModel):
    id: int
    category_id: int
    team1_id: Optional[int]
    team2_id: Optional[int]
    scheduled_time: Optional[datetime]
    result: Optional[str]
    winner_team_id: Optional[int]
    is_draw: bool
    score_data: Optional[Any] = None
    team1: Optional[TeamBrief] = None
    team2: Optional[TeamBrief] = None


# --- Requests ---


class AssociationCreate(BaseModel):
    name: str


class EventCreate(BaseModel):
    name: str
    start_date: datetime
    end_date: datetime
    venue: Optional[str] = None
    association_id: int
    admin_email: Optional[str] = None  # Required when a developer creates the event
    admin_name: Optional[str] = None
    admin_password: Optional[str] = None  # Required only if the admin account is new


class EventUpdate(BaseModel):
    name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    venue: Optional[str] = None


class GameCreate(BaseModel):
    name: str
    event_id: int


class GameUpdate(BaseModel):
    name: str


class CategoryCreate(BaseModel):
    name: str
    entry_fee: float = 0
    game_id: int
    incharge_email: str
    incharge_name: Optional[str] = None
    incharge_password: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    entry_fee: Optional[float] = None
    incharge_email: Optional[str] = None
    incharge_name: Optional[str] = None
    incharge_password: Optional[str] = None


class TeamMemberIn(BaseModel):
    name: str
    branch: Optional[str] = None
    year: Optional[str] = None

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, v):
        return _coerce_str(v)


class TeamRegister(BaseModel):
    name: str
    captain_name: str
    branch: Optional[str] = None
    year: Optional[str] = None
    category_id: int
    members: list[TeamMemberIn] = []

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, v):
        return _coerce_str(v)


class TeamStatusUpdate(BaseModel):
    status: str  # APPROVED | REJECTED


class MatchCreate(BaseModel):
    category_id: int
    team1_id: Optional[int] = None
    team2_id: Optional[int] = None
    scheduled_time: Optional[datetime] = None


class MatchUpdate(BaseModel):
    team1_id: Optional[int] = None
    team2_id: Optional[int] = None
    scheduled_time: Optional[datetime] = None


class MatchResultUpdate(BaseModel):
    result: Optional[str] = None  # winning team id, "Team1 Won", "Team2 Won" or "DRAW"; null clears
    score_data: Optional[Any] = None

    @field_validator("result", mode="before")
    @classmethod
    def coerce_result(cls, v):
        return _coerce_str(v)
