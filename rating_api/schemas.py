"""Pydantic schemas for FastAPI request / response models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    name: str = ""
    password: str = ""


class AdminCredentials(BaseModel):
    """Admin routes that act on another player carry the admin's login separately."""

    model_config = ConfigDict(populate_by_name=True)

    admin_name: str = Field(default="", alias="adminName")
    admin_password: str = Field(default="", alias="adminPassword")


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

class PlayerDetail(BaseModel):
    name: str
    can_rate: bool

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    ok: bool = True
    name: str


class OrderResponse(BaseModel):
    ok: bool = True
    name: str
    day: str
    order: list[str]


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------

class RatingEntry(BaseModel):
    ratee: str = ""
    score: Any = None  # validated in the route so bad input maps to invalid_score


class SubmitRequest(Credentials):
    entries: list[RatingEntry] = Field(default_factory=list)


class RatingRecord(BaseModel):
    rater: str
    ratee: str
    score: int
    timestamp: int


class MineResponse(BaseModel):
    ok: bool = True
    match_id: int
    ratings: list[RatingRecord]


# ---------------------------------------------------------------------------
# Leaderboards
# ---------------------------------------------------------------------------

class LeaderboardRow(BaseModel):
    player: str
    average: float
    ratings: int


class LeaderboardResponse(BaseModel):
    ok: bool = True
    match_id: int
    locked: bool
    ready: bool
    raters: int
    total: int
    rows: list[LeaderboardRow]


class OverallRow(LeaderboardRow):
    matches: int


class OverallResponse(BaseModel):
    ok: bool = True
    matches: int
    rows: list[OverallRow]


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class AddPlayerRequest(AdminCredentials):
    name: str = ""
    password: str = ""


class RemovePlayerRequest(AdminCredentials):
    name: str = ""


class PermissionRequest(AdminCredentials):
    name: str = ""
    can_rate: bool


class LockRequest(Credentials):
    locked: bool


class LockResponse(BaseModel):
    ok: bool = True
    locked: bool


class ResetResponse(BaseModel):
    ok: bool = True
    match_id: int


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

class CommentCreate(Credentials):
    text: str = ""


class VoteRequest(Credentials):
    vote: str = ""


class CommentOut(BaseModel):
    id: int
    text: str
    created_at: Optional[datetime] = None
    likes: int = 0
    dislikes: int = 0
    my_vote: Optional[str] = None


class CommentList(BaseModel):
    ok: bool = True
    match_id: int
    comments: list[CommentOut]


class CommentCreated(BaseModel):
    ok: bool = True
    comment: CommentOut


class VoteResponse(BaseModel):
    ok: bool = True
    comment_id: int
    likes: int
    dislikes: int
    my_vote: Optional[str] = None
