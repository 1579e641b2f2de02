"""
PitchScout API
==============
AI scouting backend for youth football

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from pitchscout.config import configure_logging, settings
from pitchscout.database import check_database_connection, engine
from pitchscout.dependencies import close_clients, get_gateway
from pitchscout.errors import register_exception_handlers
from pitchscout.middleware import setup_middleware
from pitchscout.routers import (
    ai_router,
    clubs_router,
    health_router,
    players_router,
    results_router,
    videos_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("PitchScout API starting up...")
    await check_database_connection()
    logger.info("Database connection verified")
    if not get_gateway().is_configured():
        logger.warning("AI_GATEWAY_API_KEY is not set; AI endpoints will return 500")
    yield
    logger.info("PitchScout API shutting down...")
    await close_clients()
    await engine.dispose()


tags_metadata = [
    {
        "name": "Health",
        "description": "Health check and status endpoints",
    },
    {
        "name": "AI",
        "description": "Video analysis, scouting reports, club matching and coaching chat (bearer token required)",
    },
    {
        "name": "Players",
        "description": "Player profiles and achievements",
    },
    {
        "name": "Clubs",
        "description": "Reference clubs used for matching",
    },
    {
        "name": "Videos",
        "description": "Match video uploads",
    },
    {
        "name": "Results",
        "description": "Persisted analyses, reports, matches, chat history and usage",
    },
]


app = FastAPI(
    title="PitchScout API",
    description="""
## AI scouting for youth football

Every analysis, report, match and coaching reply is produced by a hosted
chat-completions model; this API supplies prompts, parsing, persistence,
authentication and per-user daily limits.

### Daily limits (per user, per UTC day)

- `analyze-video`: 50
- `generate-scouting-report`: 30
- `player-club-matching`: 20
- `sports-coach-chat`: 200

### Authentication

AI endpoints and `/players/me` require `Authorization: Bearer <access token>`
issued by the identity provider. Errors are returned as `{"error": "..."}`.
""",
    version=settings.api_version,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=tags_metadata,
)

register_exception_handlers(app)
setup_middleware(app)

# Health endpoints at root level
app.include_router(health_router)

# API v1 endpoints
app.include_router(ai_router, prefix="/api/v1")
app.include_router(players_router, prefix="/api/v1")
app.include_router(clubs_router, prefix="/api/v1")
app.include_router(videos_router, prefix="/api/v1")
app.include_router(results_router, prefix="/api/v1")


@app.get("/", response_class=ORJSONResponse)
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "PitchScout API",
        "version": settings.api_version,
        "description": "AI scouting for youth football",
        "docs": "/docs",
        "health": "/health",
        "api": {
            "analyze_video": "/api/v1/analyze-video",
            "scouting_report": "/api/v1/generate-scouting-report",
            "club_matching": "/api/v1/player-club-matching",
            "coach_chat": "/api/v1/sports-coach-chat",
            "players": "/api/v1/players",
            "clubs": "/api/v1/clubs",
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pitchscout.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
