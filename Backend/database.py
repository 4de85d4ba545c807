"""
Engine and session-factory construction.

Nothing is created at import time: the application builds its engine from
``Settings`` on startup and hands the session factory to the stores.
"""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from config import Settings
from models import Base

logger = logging.getLogger(__name__)

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_players_lb_score ON players (leaderboard_id, score DESC)",
]


def build_engine(settings: Settings) -> Engine:
    """Create the engine described by ``settings``."""
    url = make_url(settings.database_url)

    if url.get_backend_name() == "sqlite":
        # SQLite uses a single-file/memory pool; pool sizing does not apply
        return create_engine(url, future=True)

    connect_args = {}
    if settings.db_statement_timeout_ms and url.get_backend_name() == "postgresql":
        connect_args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        isolation_level=settings.db_isolation_level,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory handed to the stores."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't already exist."""
    Base.metadata.create_all(bind=engine)
    with engine.connect() as conn:
        for stmt in INDEXES:
            conn.execute(text(stmt))
        conn.commit()
    logger.info("✓ Database tables and indexes ensured")


def check_connection(engine: Engine) -> bool:
    """Round-trip a trivial query; logs and returns False on failure."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.error("✗ Database connection failed: %s", exc)
        return False
    logger.info("✓ Database connected successfully")
    return True
