"""
Leaderboard data access, including the cascading delete.

A leaderboard owns its players: it can only be removed together with all of
them, in one transaction, players first.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import List, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session, sessionmaker

from errors import LeaderboardNotFoundError, PlayerNotFoundError
from models import Leaderboard, Player, utcnow

logger = logging.getLogger(__name__)


class LeaderboardStore(ABC):
    """Storage contract for leaderboards."""

    @abstractmethod
    def get_by_pk(self, leaderboard_id: UUID) -> Leaderboard:
        pass

    @abstractmethod
    def list(self) -> List[Leaderboard]:
        pass

    @abstractmethod
    def create(self, leaderboard: Leaderboard) -> None:
        pass

    @abstractmethod
    def delete(self, leaderboard: Leaderboard) -> None:
        pass


class SQLLeaderboardStore(LeaderboardStore):
    """LeaderboardStore backed by a relational database through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_by_pk(self, leaderboard_id: UUID) -> Leaderboard:
        with self._session_factory() as session:
            try:
                return session.execute(
                    select(Leaderboard).where(Leaderboard.id == leaderboard_id)
                ).scalar_one()
            except NoResultFound as exc:
                raise LeaderboardNotFoundError(leaderboard_id, str(exc)) from exc

    def list(self) -> List[Leaderboard]:
        """All leaderboards, oldest first. An empty table gives an empty list."""
        with self._session_factory() as session:
            leaderboards = list(
                session.execute(
                    select(Leaderboard).order_by(Leaderboard.created_at, Leaderboard.id)
                ).scalars()
            )
        logger.debug("Listed %d leaderboards", len(leaderboards))
        return leaderboards

    def create(self, leaderboard: Leaderboard) -> None:
        """Insert ``leaderboard`` under a fresh id with both timestamps set to now."""
        now = utcnow()
        leaderboard.id = uuid.uuid4()
        leaderboard.created_at = now
        leaderboard.updated_at = now

        with self._session_factory.begin() as session:
            session.add(leaderboard)

        logger.info("Leaderboard %s created", leaderboard.id)

    def delete(self, leaderboard: Leaderboard) -> None:
        """
        Remove ``leaderboard`` and every player in it as one unit of work.

        Steps, all inside a single transaction:
          1. Select the leaderboard's players
          2. Delete them (having none is fine)
          3. Delete the leaderboard row

        Any exception rolls the whole transaction back, so readers see either
        the complete leaderboard or nothing.

        Raises:
            PlayerNotFoundError: a selected player vanished before it was deleted
            LeaderboardNotFoundError: the leaderboard row was already gone
        """
        with self._session_factory.begin() as session:
            players = session.execute(
                select(Player).where(Player.leaderboard_id == leaderboard.id)
            ).scalars().all()

            self._delete_players(session, players)

            result = session.execute(
                delete(Leaderboard)
                .where(Leaderboard.id == leaderboard.id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise LeaderboardNotFoundError(leaderboard.id, "no rows affected by delete")

        logger.info(
            "Leaderboard %s deleted together with %d players", leaderboard.id, len(players)
        )

    def _delete_players(self, session: Session, players: Sequence[Player]) -> None:
        if not players:
            return

        ids = [p.id for p in players]
        result = session.execute(
            delete(Player)
            .where(Player.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != len(ids):
            missing = len(ids) - result.rowcount
            raise PlayerNotFoundError(
                ids[0] if len(ids) == 1 else ids,
                f"{missing} of {len(ids)} players were already deleted",
            )
