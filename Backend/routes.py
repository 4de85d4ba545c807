"""
Leaderboard API routes.

Endpoints:
  GET    /api/leaderboards                        — List leaderboards
  POST   /api/leaderboards                        — Create a leaderboard
  GET    /api/leaderboards/{id}                   — Get a leaderboard
  DELETE /api/leaderboards/{id}                   — Delete a leaderboard and its players
  GET    /api/leaderboards/{id}/players           — Ranked page of players
  POST   /api/leaderboards/{id}/players           — Add a player
  GET    /api/players/{id}                        — Get a player with its rank
  PUT    /api/players/{id}/score                  — Replace a player's score
  DELETE /api/players/{id}                        — Delete a player

NotFoundError and IntegrityError are turned into 404/409 by the handlers
registered in app.py.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import sessionmaker

from config import get_settings
from controller import LeaderboardController
from leaderboard_store import SQLLeaderboardStore
from limiter import READ_LIMIT, WRITE_LIMIT, limiter
from models import Player
from player_store import PlayerStore, SQLPlayerStore
from schemas import (
    LeaderboardOut,
    PlayerCreate,
    PlayerOut,
    PlayerPage,
    RankedPlayer,
    ScoreUpdate,
)

logger = logging.getLogger(__name__)

_settings = get_settings()

leaderboards_router = APIRouter(prefix="/api/leaderboards", tags=["Leaderboards"])
players_router = APIRouter(prefix="/api/players", tags=["Players"])


# ── Dependencies ─────────────────────────────────────────────────

def get_session_factory(request: Request) -> sessionmaker:
    """Session factory built by the app lifespan handler."""
    return request.app.state.session_factory


def get_controller(factory: sessionmaker = Depends(get_session_factory)) -> LeaderboardController:
    return LeaderboardController(SQLLeaderboardStore(factory))


def get_player_store(factory: sessionmaker = Depends(get_session_factory)) -> PlayerStore:
    return SQLPlayerStore(factory)


# ── Leaderboards ─────────────────────────────────────────────────

@leaderboards_router.get("", response_model=list[LeaderboardOut])
@limiter.limit(READ_LIMIT)
def list_leaderboards(request: Request, controller: LeaderboardController = Depends(get_controller)):
    return controller.list()


@leaderboards_router.post("", response_model=LeaderboardOut, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_leaderboard(request: Request, controller: LeaderboardController = Depends(get_controller)):
    return controller.create()


@leaderboards_router.get("/{leaderboard_id}", response_model=LeaderboardOut)
@limiter.limit(READ_LIMIT)
def get_leaderboard(
    request: Request,
    leaderboard_id: UUID,
    controller: LeaderboardController = Depends(get_controller),
):
    return controller.get(leaderboard_id)


@leaderboards_router.delete("/{leaderboard_id}", status_code=204)
@limiter.limit(WRITE_LIMIT)
def delete_leaderboard(
    request: Request,
    leaderboard_id: UUID,
    controller: LeaderboardController = Depends(get_controller),
):
    controller.remove(leaderboard_id)
    return Response(status_code=204)


@leaderboards_router.get("/{leaderboard_id}/players", response_model=PlayerPage)
@limiter.limit(READ_LIMIT)
def list_players(
    request: Request,
    leaderboard_id: UUID,
    limit: int = Query(_settings.page_size, ge=1, le=_settings.max_page_size),
    offset: int = Query(0, ge=0),
    controller: LeaderboardController = Depends(get_controller),
    players: PlayerStore = Depends(get_player_store),
):
    """Players of a leaderboard, best score first, with their ranks."""
    controller.get(leaderboard_id)
    return PlayerPage(
        leaderboard_id=leaderboard_id,
        limit=limit,
        offset=offset,
        players=players.list(leaderboard_id, limit, offset),
    )


@leaderboards_router.post("/{leaderboard_id}/players", response_model=PlayerOut, status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_player(
    request: Request,
    leaderboard_id: UUID,
    payload: PlayerCreate,
    controller: LeaderboardController = Depends(get_controller),
    players: PlayerStore = Depends(get_player_store),
):
    """
    Add a player to a leaderboard.

    The name check up front gives a clean 409; the unique constraint on
    players.name still catches concurrent inserts.
    """
    controller.get(leaderboard_id)
    if players.exists(payload.name):
        raise HTTPException(status_code=409, detail=f"Player name '{payload.name}' is taken")

    player = Player(leaderboard_id=leaderboard_id, name=payload.name, score=payload.score)
    players.create(player)
    return player


# ── Players ──────────────────────────────────────────────────────

@players_router.get("/{player_id}", response_model=RankedPlayer)
@limiter.limit(READ_LIMIT)
def get_player(
    request: Request,
    player_id: UUID,
    players: PlayerStore = Depends(get_player_store),
):
    return players.get_ranked_by_pk(player_id)


@players_router.put("/{player_id}/score", response_model=PlayerOut)
@limiter.limit(WRITE_LIMIT)
def update_player_score(
    request: Request,
    player_id: UUID,
    payload: ScoreUpdate,
    players: PlayerStore = Depends(get_player_store),
):
    player = players.get_by_pk(player_id)
    player.score = payload.score
    players.update_score(player)
    return player


@players_router.delete("/{player_id}", status_code=204)
@limiter.limit(WRITE_LIMIT)
def delete_player(
    request: Request,
    player_id: UUID,
    players: PlayerStore = Depends(get_player_store),
):
    players.delete(Player(id=player_id))
    return Response(status_code=204)
