"""
Health Check Router
===================

Provides health, readiness, and liveness endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout.config import settings
from pitchscout.dependencies import get_db, get_gateway
from pitchscout.gateway import AIGatewayClient
from pitchscout.schemas import HealthResponse, ReadyResponse

router = APIRouter(tags=["Health"])


async def _database_ok(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
) -> HealthResponse:
    """
    Health check endpoint.

    Reports the database and whether an AI gateway key is configured. The
    gateway itself is not called.
    """
    db_status = "healthy" if await _database_ok(db) else "unhealthy"
    gateway_status = "configured" if gateway.is_configured() else "unconfigured"

    overall_status = "healthy" if db_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        version=settings.api_version,
        timestamp=datetime.now(timezone.utc),
        database=db_status,
        ai_gateway=gateway_status,
        environment=settings.environment,
    )


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
) -> ReadyResponse:
    """
    Kubernetes readiness probe.

    Ready only when the database answers and the gateway key is set.
    """
    checks = {
        "database": await _database_ok(db),
        "ai_gateway": gateway.is_configured(),
    }
    return ReadyResponse(ready=all(checks.values()), checks=checks)


@router.get("/live")
async def liveness_check() -> dict:
    """Kubernetes liveness probe."""
    return {"alive": True}
