"""
Pydantic schemas: the RankedPlayer projection plus request/response bodies.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ── Projections ──────────────────────────────────────────────────

class RankedPlayer(BaseModel):
    """
    Read-only view of a player with its position in the leaderboard.

    ``rank`` is 1-based and computed at query time; it is never stored.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    leaderboard_id: UUID
    name: str
    score: int
    created_at: datetime
    updated_at: datetime
    rank: int = Field(..., ge=1)


# ── Request Schemas ──────────────────────────────────────────────

class PlayerCreate(BaseModel):
    """Request body for adding a player to a leaderboard."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique player name")
    score: int = Field(default=0, description="Initial score")


class ScoreUpdate(BaseModel):
    """Request body for replacing a player's score."""

    score: int = Field(..., description="New score")


# ── Response Schemas ─────────────────────────────────────────────

class LeaderboardOut(BaseModel):
    """A leaderboard record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class PlayerOut(BaseModel):
    """A player record without rank."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    leaderboard_id: UUID
    name: str
    score: int
    created_at: datetime
    updated_at: datetime


class PlayerPage(BaseModel):
    """One page of ranked players."""

    leaderboard_id: UUID
    limit: int
    offset: int
    players: list[RankedPlayer]


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
