"""
Leaderboard controller: the operations exposed to routes and scripts.
"""

import logging
from typing import List
from uuid import UUID

from leaderboard_store import LeaderboardStore
from models import Leaderboard

logger = logging.getLogger(__name__)


class LeaderboardController:
    """Thin facade over a LeaderboardStore. Errors propagate unchanged."""

    def __init__(self, store: LeaderboardStore):
        self._store = store

    def list(self) -> List[Leaderboard]:
        return self._store.list()

    def get(self, leaderboard_id: UUID) -> Leaderboard:
        return self._store.get_by_pk(leaderboard_id)

    def create(self) -> Leaderboard:
        """Persist a new, empty leaderboard. The store assigns its id."""
        leaderboard = Leaderboard()
        self._store.create(leaderboard)
        return leaderboard

    def remove(self, leaderboard_id: UUID) -> None:
        """Delete a leaderboard and all of its players."""
        leaderboard = self.get(leaderboard_id)
        logger.info("Removing leaderboard %s", leaderboard_id)
        self._store.delete(leaderboard)
