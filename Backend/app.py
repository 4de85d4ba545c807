"""
Leaderboard Service — FastAPI Application Entry Point.

Exposes the leaderboard controller and player store over HTTP:
  - Leaderboard creation, listing and cascading deletion
  - Ranked, paginated player listings
  - Player creation, score updates and removal
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError

from config import get_settings
from database import build_engine, build_session_factory, check_connection, init_schema
from errors import NotFoundError
from limiter import limiter
from routes import leaderboards_router, players_router

settings = get_settings()

# ── Logging ──────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)


# ── App Lifecycle ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(application: FastAPI):
    """Startup / shutdown lifecycle handler."""
    # Startup
    engine = build_engine(settings)
    check_connection(engine)
    init_schema(engine)
    application.state.session_factory = build_session_factory(engine)

    yield  # ← app is running

    # Shutdown
    engine.dispose()
    logger.info("Database connections closed")


# ── Error Handlers ───────────────────────────────────────────────

async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info("%s %s → 404: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("%s %s → 409: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Conflicts with an existing record"})


# ── FastAPI App ──────────────────────────────────────────────────

app = FastAPI(
    title="Leaderboard API",
    description="Leaderboards with ranked players and cascading deletion",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)
app.include_router(leaderboards_router)
app.include_router(players_router)


# ── Health Check ─────────────────────────────────────────────────

@app.get("/health", tags=["Health"])
def health_check():
    """Simple liveness probe."""
    return {"status": "ok", "service": "leaderboard"}


if __name__ == "__main__":
    import uvicorn
    # Run the app with auto-reload enabled
    uvicorn.run("app:app", host="127.0.0.1", port=8000, reload=True)
