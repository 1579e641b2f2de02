"""
Results Router
==============

Re-fetch persisted AI output. Every row is visible to its owner only;
other callers get 404.
- Video analyses
- Scouting reports
- Club matches
- Chat history
- Today's usage counters
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout.dependencies import CurrentUser, get_current_user, get_db, get_usage_limiter
from pitchscout.errors import NotFoundError
from pitchscout.models import AIEndpoint, ChatMessage, ClubMatch, ScoutingReport, VideoAnalysis
from pitchscout.rate_limit import DailyUsageLimiter, get_usage_for_day, utc_today
from pitchscout.schemas import (
    ChatMessageRead, ClubMatchRead, ScoutingReportRead, UsageRead, VideoAnalysisRead,
)

router = APIRouter(tags=["Results"])


@router.get("/analyses", response_model=List[VideoAnalysisRead])
async def list_analyses(
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[VideoAnalysis]:
    stmt = (
        select(VideoAnalysis)
        .where(VideoAnalysis.user_id == user.id)
        .order_by(VideoAnalysis.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.get("/analyses/{analysis_id}", response_model=VideoAnalysisRead)
async def get_analysis(
    analysis_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> VideoAnalysis:
    analysis = await db.get(VideoAnalysis, analysis_id)
    if analysis is None or analysis.user_id != user.id:
        raise NotFoundError(f"Analysis {analysis_id} not found")
    return analysis


@router.get("/scouting-reports/{report_id}", response_model=ScoutingReportRead)
async def get_scouting_report(
    report_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ScoutingReport:
    report = await db.get(ScoutingReport, report_id)
    if report is None or report.user_id != user.id:
        raise NotFoundError(f"Scouting report {report_id} not found")
    return report


@router.get("/club-matches", response_model=List[ClubMatchRead])
async def list_club_matches(
    player_id: Optional[UUID] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[ClubMatch]:
    """The caller's club matches, newest run first, best score first within a run."""
    stmt = select(ClubMatch).where(ClubMatch.user_id == user.id)
    if player_id:
        stmt = stmt.where(ClubMatch.player_id == player_id)
    stmt = stmt.order_by(ClubMatch.created_at.desc(), ClubMatch.match_score.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.get("/chat/messages", response_model=List[ChatMessageRead])
async def list_chat_messages(
    limit: int = Query(50, ge=1, le=500),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[ChatMessage]:
    """Most recent messages the caller sent to the coach, oldest first."""
    stmt = (
        select(ChatMessage)
        .where(ChatMessage.user_id == user.id)
        .order_by(ChatMessage.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(reversed(result.scalars().all()))


@router.get("/usage/me", response_model=List[UsageRead])
async def get_my_usage(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    limiter: DailyUsageLimiter = Depends(get_usage_limiter),
) -> List[UsageRead]:
    """Today's (UTC) counter for every AI endpoint, including unused ones."""
    today = utc_today()
    counts = {row.endpoint: row.request_count for row in await get_usage_for_day(db, user.id, today)}

    usage = []
    for endpoint in AIEndpoint:
        limit = limiter.limit_for(endpoint)
        count = counts.get(endpoint.value, 0)
        usage.append(UsageRead(
            endpoint=endpoint.value,
            usage_date=today,
            request_count=count,
            limit=limit,
            remaining=max(0, limit - count),
        ))
    return usage
