"""
PitchScout API Routers
======================

All API routers for the PitchScout API.
"""

from pitchscout.routers.health import router as health_router
from pitchscout.routers.players import router as players_router
from pitchscout.routers.clubs import router as clubs_router
from pitchscout.routers.videos import router as videos_router
from pitchscout.routers.ai import router as ai_router
from pitchscout.routers.results import router as results_router

__all__ = [
    "health_router",
    "players_router",
    "clubs_router",
    "videos_router",
    "ai_router",
    "results_router",
]
