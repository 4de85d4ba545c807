"""
Tests for SQLLeaderboardStore, with most weight on the cascading delete.
"""

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import NoResultFound

from errors import LeaderboardNotFoundError, PlayerNotFoundError
from leaderboard_store import SQLLeaderboardStore
from models import Leaderboard, Player


class FailingPlayerDeleteStore(SQLLeaderboardStore):
    """Deletes the players, then fails before the leaderboard row goes."""

    def _delete_players(self, session, players):
        super()._delete_players(session, players)
        raise RuntimeError("connection lost")


class VanishingPlayerStore(SQLLeaderboardStore):
    """Simulates a player removed between the listing and the bulk delete."""

    def _delete_players(self, session, players):
        session.execute(delete(Player).where(Player.id == players[0].id))
        super()._delete_players(session, players)


class TestBasics:

    def test_create_assigns_identity_and_timestamps(self, leaderboard_store):
        before = datetime.now(timezone.utc)
        first, second = Leaderboard(), Leaderboard()

        leaderboard_store.create(first)
        leaderboard_store.create(second)

        assert first.id is not None
        assert first.id != second.id
        assert first.created_at >= before
        assert first.updated_at == first.created_at

    def test_get_by_pk(self, leaderboard, leaderboard_store):
        assert leaderboard_store.get_by_pk(leaderboard.id).id == leaderboard.id

    def test_get_by_pk_missing_wraps_cause(self, leaderboard_store):
        missing = uuid.uuid4()

        with pytest.raises(LeaderboardNotFoundError) as exc_info:
            leaderboard_store.get_by_pk(missing)

        assert exc_info.value.record_id == missing
        assert isinstance(exc_info.value.__cause__, NoResultFound)

    def test_list_empty(self, leaderboard_store):
        assert leaderboard_store.list() == []

    def test_list(self, leaderboard_store):
        boards = [Leaderboard() for _ in range(3)]
        for board in boards:
            leaderboard_store.create(board)

        assert {b.id for b in leaderboard_store.list()} == {b.id for b in boards}


class TestCascadingDelete:

    def test_delete_empty_leaderboard(self, leaderboard, leaderboard_store):
        leaderboard_store.delete(leaderboard)

        with pytest.raises(LeaderboardNotFoundError):
            leaderboard_store.get_by_pk(leaderboard.id)

    def test_delete_removes_all_players(self, leaderboard, leaderboard_store, add_player, player_store):
        """L1 = {A: 100, B: 200, C: 200}; deleting L1 removes everything."""
        a = add_player(leaderboard, "A", 100)
        add_player(leaderboard, "B", 200)
        add_player(leaderboard, "C", 200)

        listed = player_store.list(leaderboard.id, limit=10, offset=0)
        assert {p.name for p in listed[:2]} == {"B", "C"}
        assert [p.rank for p in listed] == [1, 2, 3]
        assert listed[2].id == a.id

        leaderboard_store.delete(leaderboard)

        with pytest.raises(LeaderboardNotFoundError):
            leaderboard_store.get_by_pk(leaderboard.id)
        with pytest.raises(PlayerNotFoundError):
            player_store.get_by_pk(a.id)
        assert player_store.list(leaderboard.id, limit=10, offset=0) == []

    def test_delete_leaves_other_leaderboards_alone(
        self, leaderboard, leaderboard_store, add_player, player_store
    ):
        other = Leaderboard()
        leaderboard_store.create(other)
        add_player(leaderboard, "a", 1)
        survivor = add_player(other, "b", 2)

        leaderboard_store.delete(leaderboard)

        assert player_store.get_by_pk(survivor.id).leaderboard_id == other.id
        assert [b.id for b in leaderboard_store.list()] == [other.id]

    def test_delete_missing_leaderboard(self, leaderboard_store):
        ghost = Leaderboard(id=uuid.uuid4())

        with pytest.raises(LeaderboardNotFoundError) as exc_info:
            leaderboard_store.delete(ghost)

        assert exc_info.value.record_id == ghost.id

    def test_failure_rolls_back_everything(self, session_factory, leaderboard, add_player, player_store):
        players = [add_player(leaderboard, f"p{i}", i) for i in range(3)]
        store = FailingPlayerDeleteStore(session_factory)

        with pytest.raises(RuntimeError):
            store.delete(leaderboard)

        assert store.get_by_pk(leaderboard.id).id == leaderboard.id
        assert {p.id for p in player_store.list(leaderboard.id, 10, 0)} == {p.id for p in players}

    def test_vanished_player_reported_and_rolled_back(
        self, session_factory, leaderboard, add_player, player_store
    ):
        add_player(leaderboard, "a", 1)
        add_player(leaderboard, "b", 2)
        store = VanishingPlayerStore(session_factory)

        with pytest.raises(PlayerNotFoundError) as exc_info:
            store.delete(leaderboard)

        assert "already deleted" in str(exc_info.value)
        assert store.get_by_pk(leaderboard.id).id == leaderboard.id
        assert len(player_store.list(leaderboard.id, 10, 0)) == 2
