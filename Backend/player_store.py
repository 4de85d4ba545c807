"""
Player data access: lookups, ranked queries and score updates.

Rank is never stored. It is computed on read with

    ROW_NUMBER() OVER (PARTITION BY leaderboard_id
                       ORDER BY score DESC, created_at, id)

so every player in a leaderboard gets a distinct rank 1..N, ties included,
and the order is the same on every query.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List
from uuid import UUID

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import sessionmaker

from errors import PlayerNotFoundError
from models import Player, utcnow
from schemas import RankedPlayer

logger = logging.getLogger(__name__)

# Ordering inside a leaderboard; shared by the window and the page query.
RANK_ORDER = (Player.score.desc(), Player.created_at.asc(), Player.id.asc())

_PLAYER_COLUMNS = (
    Player.id,
    Player.leaderboard_id,
    Player.name,
    Player.score,
    Player.created_at,
    Player.updated_at,
)


def rank_column():
    """Window expression numbering players within their leaderboard."""
    return (
        func.row_number()
        .over(partition_by=Player.leaderboard_id, order_by=RANK_ORDER)
        .label("rank")
    )


def rank_players(players: Iterable[Player]) -> List[RankedPlayer]:
    """
    Rank a single leaderboard's players in application code.

    Equivalent to the window expression for engines without window
    functions. Costs a full sort of the partition.
    """
    ordered = sorted(players, key=lambda p: (-p.score, p.created_at, p.id))
    return [
        RankedPlayer(
            id=p.id,
            leaderboard_id=p.leaderboard_id,
            name=p.name,
            score=p.score,
            created_at=p.created_at,
            updated_at=p.updated_at,
            rank=position,
        )
        for position, p in enumerate(ordered, start=1)
    ]


class PlayerStore(ABC):
    """Storage contract for players."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def get_by_pk(self, player_id: UUID) -> Player:
        pass

    @abstractmethod
    def get_ranked_by_pk(self, player_id: UUID) -> RankedPlayer:
        pass

    @abstractmethod
    def list(self, leaderboard_id: UUID, limit: int, offset: int) -> List[RankedPlayer]:
        pass

    @abstractmethod
    def create(self, player: Player) -> None:
        pass

    @abstractmethod
    def update_score(self, player: Player) -> None:
        pass

    @abstractmethod
    def delete(self, player: Player) -> None:
        pass


class SQLPlayerStore(PlayerStore):
    """
    PlayerStore backed by a relational database through SQLAlchemy.

    The session factory should be built with ``expire_on_commit=False`` so
    returned objects stay readable after their session closes.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def exists(self, name: str) -> bool:
        """Whether any player already uses ``name``."""
        with self._session_factory() as session:
            found = session.execute(select(exists().where(Player.name == name))).scalar()
        logger.debug("Player name %r exists=%s", name, found)
        return bool(found)

    def get_by_pk(self, player_id: UUID) -> Player:
        with self._session_factory() as session:
            try:
                return session.execute(
                    select(Player).where(Player.id == player_id)
                ).scalar_one()
            except NoResultFound as exc:
                raise PlayerNotFoundError(player_id, str(exc)) from exc

    def get_ranked_by_pk(self, player_id: UUID) -> RankedPlayer:
        """
        Fetch a player together with its rank in its leaderboard.

        The window runs over the player's whole leaderboard in a subquery
        and only then is filtered down to the one row.
        """
        own_leaderboard = (
            select(Player.leaderboard_id).where(Player.id == player_id).scalar_subquery()
        )
        ranked = (
            select(*_PLAYER_COLUMNS, rank_column())
            .where(Player.leaderboard_id == own_leaderboard)
            .subquery()
        )
        with self._session_factory() as session:
            try:
                row = session.execute(select(ranked).where(ranked.c.id == player_id)).one()
            except NoResultFound as exc:
                raise PlayerNotFoundError(player_id, str(exc)) from exc
        return RankedPlayer(**row._asdict())

    def list(self, leaderboard_id: UUID, limit: int, offset: int) -> List[RankedPlayer]:
        """One page of a leaderboard, best score first. No rows is an empty list."""
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")

        stmt = (
            select(*_PLAYER_COLUMNS, rank_column())
            .where(Player.leaderboard_id == leaderboard_id)
            .order_by(*RANK_ORDER)
            .limit(limit)
            .offset(offset)
        )
        with self._session_factory() as session:
            rows = session.execute(stmt).all()

        logger.debug(
            "Listed %d players of leaderboard %s (limit=%d, offset=%d)",
            len(rows), leaderboard_id, limit, offset,
        )
        return [RankedPlayer(**row._asdict()) for row in rows]

    def create(self, player: Player) -> None:
        """Insert ``player``, assigning an id if missing and stamping both timestamps."""
        now = utcnow()
        if player.id is None:
            player.id = uuid.uuid4()
        if player.score is None:
            player.score = 0
        player.created_at = now
        player.updated_at = now

        with self._session_factory.begin() as session:
            session.add(player)

        logger.info(
            "Player %s (%r) created in leaderboard %s with score %d",
            player.id, player.name, player.leaderboard_id, player.score,
        )

    def update_score(self, player: Player) -> None:
        """Write ``player.score``; nothing else about the record changes."""
        now = utcnow()
        stmt = (
            update(Player)
            .where(Player.id == player.id)
            .values(score=player.score, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise PlayerNotFoundError(player.id, "no rows affected by update")

        player.updated_at = now
        logger.info("Player %s score set to %d", player.id, player.score)

    def delete(self, player: Player) -> None:
        stmt = (
            delete(Player)
            .where(Player.id == player.id)
            .execution_options(synchronize_session=False)
        )
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise PlayerNotFoundError(player.id, "no rows affected by delete")

        logger.info("Player %s deleted", player.id)
