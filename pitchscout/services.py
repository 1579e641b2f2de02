"""
PitchScout Business Logic Services
==================================

Each AI feature follows the same shape: build prompt messages, ask the
gateway, parse the JSON it returns, persist the result. The four pipelines:
- Video analysis (plus deterministic highlight generation)
- Scouting report generation
- Player/club matching
- Coaching chat (streamed, only the outbound user message is persisted)

Video analysis never inspects the video itself; scores come from the model
prompted with position, age and height only. Results are flagged as simulated.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout import prompts
from pitchscout.dependencies import CurrentUser
from pitchscout.errors import NotFoundError, PermissionDeniedError, ResponseParseError
from pitchscout.gateway import AIGatewayClient, parse_json_content
from pitchscout.models import (
    ChatMessage, ChatRole, Club, ClubMatch, PlayerProfile, ScoutingReport, VideoAnalysis,
)
from pitchscout.schemas import (
    ClubMatchingRequest, CoachChatRequest, ScoutingReportRequest, VideoAnalysisRequest,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SHARED HELPERS
# =============================================================================

def overall_rating(profile: PlayerProfile) -> int:
    """Mean of the six skill ratings, rounded half up."""
    ratings = [
        profile.pace, profile.shooting, profile.passing,
        profile.dribbling, profile.defending, profile.physical,
    ]
    ratings = [r if r is not None else 50 for r in ratings]
    return int(sum(ratings) / len(ratings) + 0.5)


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return None


async def get_owned_profile(db: AsyncSession, user: CurrentUser, player_id: Optional[UUID]) -> Optional[PlayerProfile]:
    """
    Resolve an optional player id to a profile owned by the caller.

    Raises:
        NotFoundError: if the profile does not exist
        PermissionDeniedError: if it belongs to someone else
    """
    if player_id is None:
        return None
    profile = await db.get(PlayerProfile, player_id)
    if profile is None:
        raise NotFoundError(f"Player {player_id} not found")
    if profile.user_id != user.id:
        raise PermissionDeniedError("You can only run analyses for your own profile")
    return profile


# =============================================================================
# VIDEO ANALYSIS
# =============================================================================

def format_timestamp(seconds: int) -> str:
    """``m:ss`` match-clock timestamp."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def _score_rating(score: Any, default: int) -> int:
    """Turn a 1-100 score into a 1-10 rating, falling back to ``default``."""
    value = _as_int(score)
    rating = int(value / 10 + 0.5) if value is not None else 0
    return min(10, rating or default)


def generate_highlights(analysis: Dict[str, Any], position: str) -> List[Dict[str, Any]]:
    """
    Derive highlight moments from the detected event counts.

    Highlights are deterministic: each event type contributes at most one
    entry at a fixed match-clock offset, followed by one position-specific
    entry for attackers (ST, LW, RW) or defenders (CB, CDM).
    """
    events = analysis.get("events_detected") or {}
    technical = analysis.get("technical_skills") or {}
    physical = analysis.get("physical_metrics") or {}
    tactical = analysis.get("tactical_awareness") or {}

    def count(name: str) -> int:
        return _as_int(events.get(name)) or 0

    highlights = []

    if count("passes") > 5:
        highlights.append({
            "timestamp": format_timestamp(120),
            "type": "Key Pass",
            "description": "Excellent vision shown with a through ball that split the defense",
            "rating": _score_rating(tactical.get("vision"), 7),
        })

    if count("shots") > 0:
        highlights.append({
            "timestamp": format_timestamp(450),
            "type": "Shot on Target",
            "description": "Powerful strike from outside the box forcing a save",
            "rating": _score_rating(technical.get("shooting"), 6),
        })

    if count("tackles") > 2:
        highlights.append({
            "timestamp": format_timestamp(780),
            "type": "Defensive Action",
            "description": "Well-timed tackle to win back possession in the midfield",
            "rating": 8,
        })

    if count("sprints") > 3:
        highlights.append({
            "timestamp": format_timestamp(1200),
            "type": "Sprint Recovery",
            "description": "Impressive pace shown tracking back to cover defensive position",
            "rating": _score_rating(physical.get("speed"), 7),
        })

    if count("interceptions") > 1:
        highlights.append({
            "timestamp": format_timestamp(1650),
            "type": "Interception",
            "description": "Read the play excellently to intercept a dangerous pass",
            "rating": _score_rating(tactical.get("positioning"), 7),
        })

    if position in ("ST", "LW", "RW"):
        highlights.append({
            "timestamp": format_timestamp(2100),
            "type": "Attacking Move",
            "description": "Creative dribble past defender creating space in the final third",
            "rating": _score_rating(technical.get("dribbling"), 7),
        })
    elif position in ("CB", "CDM"):
        highlights.append({
            "timestamp": format_timestamp(2100),
            "type": "Defensive Header",
            "description": "Commanding aerial presence clearing danger from a set piece",
            "rating": 8,
        })

    return highlights


async def analyze_video(
    db: AsyncSession,
    gateway: AIGatewayClient,
    user: CurrentUser,
    request: VideoAnalysisRequest,
) -> Tuple[VideoAnalysis, List[Dict[str, Any]]]:
    """Run the simulated analysis and persist it to ``video_analyses``."""
    profile = await get_owned_profile(db, user, request.player_id)

    messages = prompts.video_analysis_messages(
        position=request.position,
        file_name=request.file_name,
        player_age=request.player_age,
        player_height=request.player_height,
    )
    logger.info(f"Requesting video analysis for position={request.position} user={user.id}")
    content = await gateway.complete(messages)

    analysis = parse_json_content(content, "Failed to parse analysis results")
    if not isinstance(analysis, dict):
        raise ResponseParseError("Failed to parse analysis results")

    highlights = generate_highlights(analysis, request.position)

    record = VideoAnalysis(
        user_id=user.id,
        player_id=profile.id if profile else None,
        video_id=request.video_id,
        video_url=request.video_url,
        file_name=request.file_name,
        position=request.position,
        player_age=request.player_age,
        player_height=request.player_height,
        analysis_data=analysis,
        highlights=highlights,
        overall_score=_as_int(analysis.get("overall_score")),
        model=gateway.model,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info(f"Analysis complete: id={record.id} overall_score={record.overall_score}")
    return record, highlights


# =============================================================================
# SCOUTING REPORT
# =============================================================================

async def generate_scouting_report(
    db: AsyncSession,
    gateway: AIGatewayClient,
    user: CurrentUser,
    request: ScoutingReportRequest,
) -> ScoutingReport:
    analysis_id = request.analysis_id
    if analysis_id is not None:
        analysis = await db.get(VideoAnalysis, analysis_id)
        if analysis is None or analysis.user_id != user.id:
            raise NotFoundError(f"Analysis {analysis_id} not found")

    messages = prompts.scouting_report_messages(request.player_data, request.analysis_data)
    logger.info(f"Generating scouting report for user={user.id}")
    content = await gateway.complete(messages)

    report = parse_json_content(content, "Failed to parse scouting report")
    if not isinstance(report, dict):
        raise ResponseParseError("Failed to parse scouting report")

    recommendation = report.get("recommendation")
    action = recommendation.get("action") if isinstance(recommendation, dict) else None
    classification = report.get("scout_classification")

    record = ScoutingReport(
        user_id=user.id,
        analysis_id=analysis_id,
        report_data=report,
        scout_classification=str(classification)[:10] if classification else None,
        recommended_action=str(action)[:100] if action else None,
        model=gateway.model,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info(
        f"Scouting report generated: id={record.id} "
        f"classification={record.scout_classification} action={record.recommended_action}"
    )
    return record


# =============================================================================
# CLUB MATCHING
# =============================================================================

def club_context(club: Club) -> Dict[str, Any]:
    """Club row as injected into the matching prompt."""
    return {
        "id": str(club.id),
        "name": club.name,
        "league": club.league,
        "level": club.level,
        "playing_style": list(club.playing_style or []),
        "positions_needed": list(club.positions_needed or []),
        "age_preference": club.age_preference,
        "development_focus": club.development_focus,
        "location": club.location,
        "country": club.country,
        "reputation": club.reputation,
        "description": club.description,
    }


async def list_active_clubs(db: AsyncSession) -> List[Club]:
    result = await db.execute(
        select(Club).where(Club.is_active.is_(True)).order_by(Club.reputation.desc(), Club.name)
    )
    return list(result.scalars().all())


async def match_player_to_clubs(
    db: AsyncSession,
    gateway: AIGatewayClient,
    user: CurrentUser,
    request: ClubMatchingRequest,
) -> Dict[str, Any]:
    """
    Rank every active club for the player and persist one row per match.

    Matches naming an unknown club are returned with ``club_details`` set
    to None and are not persisted.
    """
    profile = await get_owned_profile(db, user, request.player_id)
    clubs = await list_active_clubs(db)
    contexts = {str(club.id): club_context(club) for club in clubs}

    messages = prompts.club_matching_messages(
        request.player_profile,
        request.analysis_data,
        request.preferences,
        list(contexts.values()),
    )
    logger.info(f"Running player-club matching against {len(clubs)} clubs for user={user.id}")
    content = await gateway.complete(messages)

    results = parse_json_content(content, "Failed to parse matching results")
    if not isinstance(results, dict) or not isinstance(results.get("matches", []), list):
        raise ResponseParseError("Failed to parse matching results")

    enriched = []
    for match in results.get("matches", []):
        if not isinstance(match, dict):
            continue
        club_id = str(match.get("club_id", ""))
        details = contexts.get(club_id)
        enriched.append({**match, "club_details": details})

        if details is not None:
            db.add(ClubMatch(
                user_id=user.id,
                player_id=profile.id if profile else None,
                club_id=UUID(club_id),
                match_score=_as_int(match.get("match_score")),
                match_grade=str(match.get("match_grade"))[:5] if match.get("match_grade") else None,
                match_data=match,
                model=gateway.model,
            ))

    results["matches"] = enriched
    await db.commit()

    top = results.get("top_recommendation")
    logger.info(
        f"Matching complete: matches_count={len(enriched)} "
        f"top_match={top.get('club_id') if isinstance(top, dict) else None}"
    )
    return results


# =============================================================================
# COACH CHAT
# =============================================================================

async def start_coach_chat(
    db: AsyncSession,
    gateway: AIGatewayClient,
    user: CurrentUser,
    request: CoachChatRequest,
) -> httpx.Response:
    """
    Persist the outbound user message and open the upstream stream.

    The returned response is still open; the caller relays its body and
    closes it.
    """
    outbound = next(
        (turn for turn in reversed(request.messages) if turn.role == ChatRole.USER),
        None,
    )
    if outbound is not None:
        db.add(ChatMessage(
            user_id=user.id,
            role=ChatRole.USER,
            content=outbound.content,
            intent=request.intent,
        ))
        await db.commit()

    logger.info(f"Processing chat request with intent: {request.intent.value}")
    messages = prompts.coach_chat_messages(
        request.intent,
        [{"role": turn.role.value, "content": turn.content} for turn in request.messages],
    )
    return await gateway.open_stream(messages)
