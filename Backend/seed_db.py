"""
Database seeding script for the Leaderboard service.

Populates the database configured by DATABASE_URL with demo data:
  - 5 leaderboards
  - 200 players per leaderboard with random scores

Goes through the stores, so every row gets ids and timestamps exactly as
the API would assign them.

Usage:
    python seed_db.py
"""

import random
import time

from config import get_settings
from controller import LeaderboardController
from database import build_engine, build_session_factory, init_schema
from leaderboard_store import SQLLeaderboardStore
from models import Player
from player_store import SQLPlayerStore

LEADERBOARDS = 5
PLAYERS_PER_LEADERBOARD = 200


def seed(leaderboards: int = LEADERBOARDS, players_per_leaderboard: int = PLAYERS_PER_LEADERBOARD):
    """Run all seeding steps sequentially."""
    engine = build_engine(get_settings())
    init_schema(engine)
    factory = build_session_factory(engine)

    controller = LeaderboardController(SQLLeaderboardStore(factory))
    players = SQLPlayerStore(factory)

    try:
        # ── Step 1: Clean Slate ──────────────────────────────────
        print("⏳ Removing existing leaderboards …")
        for leaderboard in controller.list():
            controller.remove(leaderboard.id)

        # ── Step 2: Leaderboards and players ─────────────────────
        print(f"⏳ Creating {leaderboards} leaderboards × {players_per_leaderboard} players …")
        start = time.time()
        for board_no in range(1, leaderboards + 1):
            leaderboard = controller.create()
            for player_no in range(1, players_per_leaderboard + 1):
                players.create(Player(
                    leaderboard_id=leaderboard.id,
                    name=f"board{board_no}_player{player_no}",
                    score=random.randint(0, 10000),
                ))
            print(f"   ✓ Leaderboard {leaderboard.id}")
        print(f"   ✓ Seeded in {time.time() - start:.1f}s")
    finally:
        engine.dispose()

    print("\n🎉 Database seeding complete!")


if __name__ == "__main__":
    seed()
