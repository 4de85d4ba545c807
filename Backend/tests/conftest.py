"""
Pytest fixtures for the Leaderboard service tests.

Every test gets a fresh in-memory SQLite database (window functions are
available from SQLite 3.25) with foreign keys enforced, and stores built on
an injected session factory.
"""

import os

# Must be set before config/limiter are imported by the test modules
os.environ["LEADERBOARD_RATE_LIMIT_ENABLED"] = "false"
os.environ["LEADERBOARD_LOG_LEVEL"] = "DEBUG"

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from controller import LeaderboardController
from database import build_session_factory, init_schema
from leaderboard_store import SQLLeaderboardStore
from models import Leaderboard, Player
from player_store import SQLPlayerStore


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def player_store(session_factory):
    return SQLPlayerStore(session_factory)


@pytest.fixture
def leaderboard_store(session_factory):
    return SQLLeaderboardStore(session_factory)


@pytest.fixture
def controller(leaderboard_store):
    return LeaderboardController(leaderboard_store)


@pytest.fixture
def leaderboard(leaderboard_store):
    """A persisted, empty leaderboard."""
    board = Leaderboard()
    leaderboard_store.create(board)
    return board


@pytest.fixture
def add_player(player_store):
    """Factory creating persisted players: add_player(leaderboard, name, score)."""

    def _add(board, name, score):
        player = Player(leaderboard_id=board.id, name=name, score=score)
        player_store.create(player)
        return player

    return _add
