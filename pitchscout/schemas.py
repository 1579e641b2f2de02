"""
PitchScout API Schemas
======================

Pydantic schemas for request/response validation:
- Health and status
- Player profiles, achievements and videos
- Clubs
- AI endpoint requests (analysis, scouting report, matching, chat)
- Persisted AI results
"""

import datetime as dt
from datetime import date, datetime
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pitchscout.models import ChatIntent, ChatRole, Position


# =============================================================================
# GENERIC TYPES
# =============================================================================

T = TypeVar('T')


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard paginated response wrapper."""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, page_size: int):
        total_pages = (total + page_size - 1) // page_size if page_size > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages
        )


class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Body of every deliberate error response."""
    error: str


# =============================================================================
# HEALTH & STATUS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: datetime
    database: str
    ai_gateway: str
    environment: str


class ReadyResponse(BaseModel):
    """Readiness probe response."""
    ready: bool
    checks: Dict[str, bool]


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

def _check_position(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().upper()
    if value not in Position.__members__:
        raise ValueError(f"Invalid position '{value}'. Expected one of: {', '.join(Position.__members__)}")
    return value


Rating = Annotated[int, Field(ge=0, le=100)]


# =============================================================================
# PLAYER PROFILE SCHEMAS
# =============================================================================

class PlayerProfileBase(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=255)
    position: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=10, le=30)
    height_cm: Optional[int] = Field(default=None, ge=140, le=220)
    weight_kg: Optional[int] = Field(default=None, ge=30, le=150)
    preferred_foot: Optional[str] = Field(default=None, pattern="^(Right|Left|Both)$")
    nationality: Optional[str] = None
    current_club: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

    pace: Rating = 50
    shooting: Rating = 50
    passing: Rating = 50
    dribbling: Rating = 50
    defending: Rating = 50
    physical: Rating = 50

    instagram_url: Optional[str] = None
    youtube_url: Optional[str] = None
    is_public: bool = True

    @field_validator("position")
    @classmethod
    def validate_position(cls, v: Optional[str]) -> Optional[str]:
        return _check_position(v)


class PlayerProfileUpdate(PlayerProfileBase):
    """Create-or-update payload for the caller's own profile."""
    pass


class AchievementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[dt.date] = None


class AchievementRead(BaseSchema):
    id: UUID
    title: str
    description: Optional[str] = None
    date: Optional[dt.date] = None


class PlayerVideoRead(BaseSchema):
    id: UUID
    title: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[int] = None
    analysis_data: Optional[Dict[str, Any]] = None
    created_at: datetime


class PlayerProfileRead(PlayerProfileBase, BaseSchema):
    id: UUID
    user_id: UUID
    created_at: datetime


class PlayerProfileBrief(BaseSchema):
    """Minimal profile info for browse lists."""
    id: UUID
    display_name: str
    position: Optional[str] = None
    age: Optional[int] = None
    nationality: Optional[str] = None
    current_club: Optional[str] = None
    avatar_url: Optional[str] = None
    overall_rating: int


class PlayerProfileDetail(PlayerProfileRead):
    """Full profile with achievements and videos."""
    achievements: List[AchievementRead] = []
    videos: List[PlayerVideoRead] = []


# =============================================================================
# CLUB SCHEMAS
# =============================================================================

class ClubRead(BaseSchema):
    id: UUID
    name: str
    league: str
    level: str
    playing_style: List[str] = []
    positions_needed: List[str] = []
    age_preference: Optional[str] = None
    development_focus: bool
    location: str
    country: Optional[str] = None
    reputation: int
    description: Optional[str] = None


# =============================================================================
# VIDEO ANALYSIS
# =============================================================================

class VideoAnalysisRequest(BaseModel):
    """Body of POST /analyze-video. Field names follow the web client."""
    model_config = ConfigDict(populate_by_name=True)

    video_id: Optional[str] = Field(default=None, alias="videoId", max_length=100)
    video_url: Optional[str] = Field(default=None, alias="videoUrl", max_length=1000)
    position: str
    file_name: Optional[str] = Field(default=None, alias="fileName", max_length=500)
    player_age: Optional[int] = Field(default=None, alias="playerAge", ge=10, le=30)
    player_height: Optional[int] = Field(default=None, alias="playerHeight", ge=140, le=220)
    player_id: Optional[UUID] = Field(default=None, alias="playerId")

    @field_validator("position")
    @classmethod
    def validate_position(cls, v: Optional[str]) -> Optional[str]:
        return _check_position(v)


class Highlight(BaseModel):
    timestamp: str
    type: str
    description: str
    rating: int


class VideoAnalysisResponse(BaseModel):
    id: UUID
    analysis: Dict[str, Any]
    highlights: List[Highlight]
    simulated: bool = True


class VideoAnalysisRead(BaseSchema):
    id: UUID
    player_id: Optional[UUID] = None
    video_id: Optional[str] = None
    video_url: Optional[str] = None
    file_name: Optional[str] = None
    position: str
    player_age: Optional[int] = None
    player_height: Optional[int] = None
    analysis_data: Dict[str, Any]
    highlights: Optional[List[Dict[str, Any]]] = None
    overall_score: Optional[int] = None
    model: str
    created_at: datetime


# =============================================================================
# SCOUTING REPORT
# =============================================================================

class ScoutingReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_data: Dict[str, Any] = Field(..., alias="playerData")
    analysis_data: Dict[str, Any] = Field(..., alias="analysisData")
    analysis_id: Optional[UUID] = Field(default=None, alias="analysisId")


class ScoutingReportResponse(BaseModel):
    id: UUID
    report: Dict[str, Any]


class ScoutingReportRead(BaseSchema):
    id: UUID
    analysis_id: Optional[UUID] = None
    report_data: Dict[str, Any]
    scout_classification: Optional[str] = None
    recommended_action: Optional[str] = None
    model: str
    created_at: datetime


# =============================================================================
# CLUB MATCHING
# =============================================================================

class ClubMatchingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    player_profile: Dict[str, Any] = Field(..., alias="playerProfile")
    analysis_data: Dict[str, Any] = Field(default_factory=dict, alias="analysisData")
    preferences: Optional[Dict[str, Any]] = None
    player_id: Optional[UUID] = Field(default=None, alias="playerId")


class ClubMatchRead(BaseSchema):
    id: UUID
    player_id: Optional[UUID] = None
    club_id: UUID
    match_score: Optional[int] = None
    match_grade: Optional[str] = None
    match_data: Dict[str, Any]
    model: str
    created_at: datetime


# =============================================================================
# COACH CHAT
# =============================================================================

class ChatTurn(BaseModel):
    role: ChatRole
    content: str = Field(..., min_length=1)


class CoachChatRequest(BaseModel):
    messages: List[ChatTurn] = Field(..., min_length=1)
    intent: ChatIntent = ChatIntent.GENERAL

    @field_validator("intent", mode="before")
    @classmethod
    def fallback_to_general(cls, v: Any) -> Any:
        """Unknown or missing intents get the general coach."""
        if isinstance(v, ChatIntent):
            return v
        try:
            return ChatIntent(str(v).strip().lower())
        except ValueError:
            return ChatIntent.GENERAL


class ChatMessageRead(BaseSchema):
    id: UUID
    role: ChatRole
    content: str
    intent: ChatIntent
    created_at: datetime


# =============================================================================
# USAGE
# =============================================================================

class UsageRead(BaseSchema):
    endpoint: str
    usage_date: date
    request_count: int
    limit: int
    remaining: int
