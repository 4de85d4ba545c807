"""
SQLAlchemy ORM models for the Leaderboard service.
Tables: leaderboards, players
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Uuid
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for every created/updated stamp."""
    return datetime.now(timezone.utc)


class Leaderboard(Base):
    """A collection of players ranked by score."""

    __tablename__ = "leaderboards"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Deletion goes through LeaderboardStore.delete, never through the ORM cascade
    players = relationship("Player", back_populates="leaderboard", passive_deletes="all")

    def __repr__(self):
        return f"<Leaderboard(id={self.id})>"


class Player(Base):
    """A participant with a score, scoped to exactly one leaderboard."""

    __tablename__ = "players"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    leaderboard_id = Column(Uuid, ForeignKey("leaderboards.id"), nullable=False)
    name = Column(String(255), unique=True, nullable=False)
    score = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    leaderboard = relationship("Leaderboard", back_populates="players")

    def __repr__(self):
        return f"<Player(id={self.id}, name='{self.name}', score={self.score})>"
