"""
Players Router
==============

Player profile endpoints:
- Public profile browsing with position filter
- Create/update the caller's own profile
- Profile detail with achievements and videos
- Achievement management
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pitchscout.config import settings
from pitchscout.dependencies import CurrentUser, get_current_user, get_db, get_optional_user
from pitchscout.errors import NotFoundError
from pitchscout.models import PlayerAchievement, PlayerProfile
from pitchscout.schemas import (
    AchievementCreate, AchievementRead, PaginatedResponse,
    PlayerProfileBrief, PlayerProfileDetail, PlayerProfileRead, PlayerProfileUpdate,
)
from pitchscout.services import overall_rating

router = APIRouter(prefix="/players", tags=["Players"])


async def _own_profile(db: AsyncSession, user: CurrentUser) -> PlayerProfile:
    result = await db.execute(select(PlayerProfile).where(PlayerProfile.user_id == user.id))
    profile = result.scalar_one_or_none()
    if not profile:
        raise NotFoundError("Player profile not found. Create one with PUT /players/me")
    return profile


@router.get("", response_model=PaginatedResponse[PlayerProfileBrief])
async def list_players(
    position: Optional[str] = Query(None, description="Filter by position, e.g. ST"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[PlayerProfileBrief]:
    """Browse public player profiles, newest first."""
    filters = [PlayerProfile.is_public.is_(True)]
    if position:
        filters.append(PlayerProfile.position == position.strip().upper())

    total = await db.scalar(select(func.count()).select_from(PlayerProfile).where(*filters))

    stmt = (
        select(PlayerProfile)
        .where(*filters)
        .order_by(PlayerProfile.created_at.desc(), PlayerProfile.display_name)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(stmt)

    items = [
        PlayerProfileBrief(
            id=p.id,
            display_name=p.display_name,
            position=p.position,
            age=p.age,
            nationality=p.nationality,
            current_club=p.current_club,
            avatar_url=p.avatar_url,
            overall_rating=overall_rating(p),
        )
        for p in result.scalars().all()
    ]
    return PaginatedResponse.create(items, total or 0, page, page_size)


@router.get("/me", response_model=PlayerProfileRead)
async def get_my_profile(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PlayerProfile:
    return await _own_profile(db, user)


@router.put("/me", response_model=PlayerProfileRead)
async def upsert_my_profile(
    payload: PlayerProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PlayerProfile:
    """Create the caller's profile, or replace its fields if it exists."""
    result = await db.execute(select(PlayerProfile).where(PlayerProfile.user_id == user.id))
    profile = result.scalar_one_or_none()

    if profile is None:
        profile = PlayerProfile(user_id=user.id, **payload.model_dump())
        db.add(profile)
    else:
        for field, value in payload.model_dump().items():
            setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    return profile


@router.post("/me/achievements", response_model=AchievementRead, status_code=status.HTTP_201_CREATED)
async def add_achievement(
    payload: AchievementCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PlayerAchievement:
    profile = await _own_profile(db, user)
    achievement = PlayerAchievement(player_id=profile.id, **payload.model_dump())
    db.add(achievement)
    await db.commit()
    await db.refresh(achievement)
    return achievement


@router.delete("/me/achievements/{achievement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_achievement(
    achievement_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    profile = await _own_profile(db, user)
    achievement = await db.get(PlayerAchievement, achievement_id)
    if achievement is None or achievement.player_id != profile.id:
        raise NotFoundError(f"Achievement {achievement_id} not found")

    await db.delete(achievement)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{player_id}", response_model=PlayerProfileDetail)
async def get_player(
    player_id: UUID,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PlayerProfileDetail:
    """
    Get a player profile.

    Private profiles are visible to their owner only; everyone else gets 404.
    Achievements are listed newest date first, videos newest upload first.
    """
    stmt = (
        select(PlayerProfile)
        .options(
            selectinload(PlayerProfile.achievements),
            selectinload(PlayerProfile.videos),
        )
        .where(PlayerProfile.id == player_id)
    )
    result = await db.execute(stmt)
    profile = result.scalar_one_or_none()

    is_owner = profile is not None and user is not None and profile.user_id == user.id
    if not profile or not (profile.is_public or is_owner):
        raise NotFoundError(f"Player {player_id} not found")

    detail = PlayerProfileDetail.model_validate(profile)
    detail.achievements.sort(key=lambda a: (a.date is not None, a.date), reverse=True)
    detail.videos.sort(key=lambda v: v.created_at, reverse=True)
    return detail
