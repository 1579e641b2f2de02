"""
PitchScout Database Models
==========================

Plain persisted records associated by foreign key:
- Profiles: player_profiles, player_achievements, player_videos
- AI results: video_analyses, scouting_reports, club_matches
- Reference data: clubs (context injected into matching prompts)
- Conversation and quota: chat_messages, api_usage

AI result blobs are stored exactly as the gateway returned them (after
fence stripping and JSON parsing). Their shape is not validated.
"""

import datetime as dt
import enum
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from pitchscout.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# ENUMS
# =============================================================================

class Position(str, enum.Enum):
    """Playing positions accepted across profiles and analysis requests."""
    GK = "GK"
    CB = "CB"
    LB = "LB"
    RB = "RB"
    CDM = "CDM"
    CM = "CM"
    CAM = "CAM"
    LM = "LM"
    RM = "RM"
    LW = "LW"
    RW = "RW"
    ST = "ST"


class AIEndpoint(str, enum.Enum):
    """AI-backed endpoints subject to a daily per-user ceiling."""
    ANALYZE_VIDEO = "analyze-video"
    SCOUTING_REPORT = "generate-scouting-report"
    CLUB_MATCHING = "player-club-matching"
    COACH_CHAT = "sports-coach-chat"


class ChatIntent(str, enum.Enum):
    """Coaching modes that select the chat system prompt."""
    PITCH = "pitch"
    EVALUATION = "evaluation"
    IMPROVEMENT = "improvement"
    PROFILE = "profile"
    GENERAL = "general"


class ChatRole(str, enum.Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# PLAYER PROFILES
# =============================================================================

class PlayerProfile(Base):
    """Player profile owned and edited by a single user."""
    __tablename__ = "player_profiles"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True)

    # Identity
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[Optional[str]] = mapped_column(String(10))
    age: Mapped[Optional[int]] = mapped_column(Integer)
    height_cm: Mapped[Optional[int]] = mapped_column(Integer)
    weight_kg: Mapped[Optional[int]] = mapped_column(Integer)
    preferred_foot: Mapped[Optional[str]] = mapped_column(String(10))  # Right, Left, Both
    nationality: Mapped[Optional[str]] = mapped_column(String(100))
    current_club: Mapped[Optional[str]] = mapped_column(String(255))
    bio: Mapped[Optional[str]] = mapped_column(Text)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000))

    # Skill ratings (0-100)
    pace: Mapped[int] = mapped_column(Integer, default=50)
    shooting: Mapped[int] = mapped_column(Integer, default=50)
    passing: Mapped[int] = mapped_column(Integer, default=50)
    dribbling: Mapped[int] = mapped_column(Integer, default=50)
    defending: Mapped[int] = mapped_column(Integer, default=50)
    physical: Mapped[int] = mapped_column(Integer, default=50)

    # Social links
    instagram_url: Mapped[Optional[str]] = mapped_column(String(500))
    youtube_url: Mapped[Optional[str]] = mapped_column(String(500))

    is_public: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    achievements: Mapped[list["PlayerAchievement"]] = relationship(
        back_populates="player", cascade="all, delete-orphan"
    )
    videos: Mapped[list["PlayerVideo"]] = relationship(
        back_populates="player", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_player_profiles_position", "position"),
        Index("ix_player_profiles_public", "is_public"),
        CheckConstraint("pace BETWEEN 0 AND 100", name="ck_player_pace_range"),
        CheckConstraint("shooting BETWEEN 0 AND 100", name="ck_player_shooting_range"),
        CheckConstraint("passing BETWEEN 0 AND 100", name="ck_player_passing_range"),
        CheckConstraint("dribbling BETWEEN 0 AND 100", name="ck_player_dribbling_range"),
        CheckConstraint("defending BETWEEN 0 AND 100", name="ck_player_defending_range"),
        CheckConstraint("physical BETWEEN 0 AND 100", name="ck_player_physical_range"),
    )


class PlayerAchievement(Base):
    """Achievement listed on a player profile."""
    __tablename__ = "player_achievements"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    player_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("player_profiles.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    date: Mapped[Optional[dt.date]] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    player: Mapped["PlayerProfile"] = relationship(back_populates="achievements")

    __table_args__ = (
        Index("ix_player_achievements_player", "player_id"),
    )


class PlayerVideo(Base):
    """Uploaded match video held in the videos bucket."""
    __tablename__ = "player_videos"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    player_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid, ForeignKey("player_profiles.id", ondelete="CASCADE")
    )
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    storage_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    video_url: Mapped[Optional[str]] = mapped_column(String(1000))
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(1000))
    content_type: Mapped[Optional[str]] = mapped_column(String(100))
    size_bytes: Mapped[Optional[int]] = mapped_column(Integer)
    analysis_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    player: Mapped[Optional["PlayerProfile"]] = relationship(back_populates="videos")

    __table_args__ = (
        Index("ix_player_videos_player", "player_id"),
        Index("ix_player_videos_user", "user_id"),
    )


# =============================================================================
# AI RESULTS
# =============================================================================

class VideoAnalysis(Base):
    """
    Analysis produced by the AI gateway for an uploaded video.

    The scores are generated from the position/age/height context only;
    the video content itself is never inspected.
    """
    __tablename__ = "video_analyses"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    player_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid, ForeignKey("player_profiles.id", ondelete="SET NULL")
    )
    video_id: Mapped[Optional[str]] = mapped_column(String(100))
    video_url: Mapped[Optional[str]] = mapped_column(String(1000))
    file_name: Mapped[Optional[str]] = mapped_column(String(500))

    # Context sent to the model
    position: Mapped[str] = mapped_column(String(10), nullable=False)
    player_age: Mapped[Optional[int]] = mapped_column(Integer)
    player_height: Mapped[Optional[int]] = mapped_column(Integer)

    analysis_data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    highlights: Mapped[Optional[list[Any]]] = mapped_column(JSONType)
    overall_score: Mapped[Optional[int]] = mapped_column(Integer)
    model: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_video_analyses_user", "user_id"),
        Index("ix_video_analyses_player", "player_id"),
    )


class ScoutingReport(Base):
    """Scouting report generated from a player's profile and analysis."""
    __tablename__ = "scouting_reports"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    analysis_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid, ForeignKey("video_analyses.id", ondelete="SET NULL")
    )

    report_data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    scout_classification: Mapped[Optional[str]] = mapped_column(String(10))
    recommended_action: Mapped[Optional[str]] = mapped_column(String(100))
    model: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    analysis: Mapped[Optional["VideoAnalysis"]] = relationship()

    __table_args__ = (
        Index("ix_scouting_reports_user", "user_id"),
        Index("ix_scouting_reports_analysis", "analysis_id"),
    )


# =============================================================================
# CLUBS AND MATCHING
# =============================================================================

class Club(Base):
    """Descriptive club row used as context for matching prompts."""
    __tablename__ = "clubs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    league: Mapped[str] = mapped_column(String(255), nullable=False)
    level: Mapped[str] = mapped_column(String(100), nullable=False)  # Elite, Top Division, Championship, Development
    playing_style: Mapped[list[str]] = mapped_column(JSONType, default=list)
    positions_needed: Mapped[list[str]] = mapped_column(JSONType, default=list)
    age_preference: Mapped[Optional[str]] = mapped_column(String(20))  # e.g. "16-19"
    development_focus: Mapped[bool] = mapped_column(Boolean, default=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(100))
    reputation: Mapped[int] = mapped_column(Integer, default=50)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_clubs_level", "level"),
        CheckConstraint("reputation BETWEEN 0 AND 100", name="ck_club_reputation_range"),
    )


class ClubMatch(Base):
    """AI-produced fit score for a (player, club) pair."""
    __tablename__ = "club_matches"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    player_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid, ForeignKey("player_profiles.id", ondelete="CASCADE")
    )
    club_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False)

    match_score: Mapped[Optional[int]] = mapped_column(Integer)
    match_grade: Mapped[Optional[str]] = mapped_column(String(5))
    match_data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    club: Mapped["Club"] = relationship()

    __table_args__ = (
        Index("ix_club_matches_user", "user_id"),
        Index("ix_club_matches_player", "player_id"),
        Index("ix_club_matches_club", "club_id"),
    )


# =============================================================================
# CHAT AND USAGE
# =============================================================================

class ChatMessage(Base):
    """Append-only log of messages users send to the coach."""
    __tablename__ = "chat_messages"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    role: Mapped[ChatRole] = mapped_column(Enum(ChatRole, native_enum=False, length=20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    intent: Mapped[ChatIntent] = mapped_column(
        Enum(ChatIntent, native_enum=False, length=20), default=ChatIntent.GENERAL
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_chat_messages_user_created", "user_id", "created_at"),
    )


class ApiUsage(Base):
    """Per-user, per-endpoint, per-day request counter."""
    __tablename__ = "api_usage"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    endpoint: Mapped[str] = mapped_column(String(100), nullable=False)
    usage_date: Mapped[date] = mapped_column(Date, nullable=False)
    request_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_request_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "endpoint", "usage_date", name="uq_api_usage_user_endpoint_day"),
        CheckConstraint("request_count >= 0", name="ck_api_usage_count_positive"),
    )
