"""
AI Router
=========

The four gateway-backed endpoints. Each one authenticates, charges the
caller's daily counter, prompts the model and persists the outcome:
- POST /analyze-video
- POST /generate-scouting-report
- POST /player-club-matching
- POST /sports-coach-chat (server-sent events)
"""

import logging
from typing import Any, Awaitable, Dict, TypeVar

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.background import BackgroundTask

from pitchscout import services
from pitchscout.dependencies import (
    CurrentUser, get_current_user, get_db, get_gateway, get_usage_limiter,
)
from pitchscout.errors import PitchScoutError
from pitchscout.gateway import AIGatewayClient
from pitchscout.models import AIEndpoint
from pitchscout.rate_limit import DailyUsageLimiter
from pitchscout.schemas import (
    ClubMatchingRequest, CoachChatRequest, ErrorResponse, Highlight,
    ScoutingReportRequest, ScoutingReportResponse, VideoAnalysisRequest, VideoAnalysisResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI"])

T = TypeVar("T")

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    402: {"model": ErrorResponse, "description": "AI gateway credits exhausted"},
    429: {"model": ErrorResponse, "description": "Daily ceiling or gateway rate limit reached"},
    500: {"model": ErrorResponse, "description": "Gateway or parse failure"},
}


async def _guarded(name: str, call: Awaitable[T]) -> T:
    """Await ``call``; anything that is not a PitchScoutError is logged and becomes a plain 500."""
    try:
        return await call
    except PitchScoutError:
        raise
    except Exception as e:
        logger.exception(f"Error in {name}")
        raise PitchScoutError("Internal error") from e


@router.post("/analyze-video", response_model=VideoAnalysisResponse, responses=ERROR_RESPONSES)
async def analyze_video(
    payload: VideoAnalysisRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
    limiter: DailyUsageLimiter = Depends(get_usage_limiter),
) -> VideoAnalysisResponse:
    """
    Produce a performance analysis for an uploaded video.

    The score is simulated from position, age and height; the video is not
    inspected. Highlights are derived from the detected event counts.
    """
    await limiter.enforce(db, user.id, AIEndpoint.ANALYZE_VIDEO)
    record, highlights = await _guarded(
        "analyze-video", services.analyze_video(db, gateway, user, payload)
    )
    return VideoAnalysisResponse(
        id=record.id,
        analysis=record.analysis_data,
        highlights=[Highlight(**h) for h in highlights],
    )


@router.post(
    "/generate-scouting-report",
    response_model=ScoutingReportResponse,
    responses=ERROR_RESPONSES,
)
async def generate_scouting_report(
    payload: ScoutingReportRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
    limiter: DailyUsageLimiter = Depends(get_usage_limiter),
) -> ScoutingReportResponse:
    await limiter.enforce(db, user.id, AIEndpoint.SCOUTING_REPORT)
    record = await _guarded(
        "generate-scouting-report",
        services.generate_scouting_report(db, gateway, user, payload),
    )
    return ScoutingReportResponse(id=record.id, report=record.report_data)


@router.post("/player-club-matching", responses=ERROR_RESPONSES)
async def player_club_matching(
    payload: ClubMatchingRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
    limiter: DailyUsageLimiter = Depends(get_usage_limiter),
) -> Dict[str, Any]:
    """
    Rank the reference clubs for a player.

    Returns the model's matching JSON with every match enriched by
    ``club_details``.
    """
    await limiter.enforce(db, user.id, AIEndpoint.CLUB_MATCHING)
    return await _guarded(
        "player-club-matching",
        services.match_player_to_clubs(db, gateway, user, payload),
    )


@router.post(
    "/sports-coach-chat",
    response_class=StreamingResponse,
    responses={**ERROR_RESPONSES, 200: {"content": {"text/event-stream": {}}}},
)
async def sports_coach_chat(
    payload: CoachChatRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
    limiter: DailyUsageLimiter = Depends(get_usage_limiter),
) -> StreamingResponse:
    """
    Stream a coaching reply.

    The upstream SSE body is relayed byte for byte; the user's outbound
    message is the only thing persisted.
    """
    await limiter.enforce(db, user.id, AIEndpoint.COACH_CHAT)
    upstream = await _guarded(
        "sports-coach-chat", services.start_coach_chat(db, gateway, user, payload)
    )
    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
        background=BackgroundTask(upstream.aclose),
    )
