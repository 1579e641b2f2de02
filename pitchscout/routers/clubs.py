"""
Clubs Router
============

Read-only reference clubs used as context for player/club matching.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout.dependencies import get_db
from pitchscout.errors import NotFoundError
from pitchscout.models import Club
from pitchscout.schemas import ClubRead

router = APIRouter(prefix="/clubs", tags=["Clubs"])


@router.get("", response_model=List[ClubRead])
async def list_clubs(
    level: Optional[str] = Query(None, description="Filter by level, e.g. Elite"),
    db: AsyncSession = Depends(get_db),
) -> List[Club]:
    """Active clubs, highest reputation first."""
    stmt = select(Club).where(Club.is_active.is_(True))
    if level:
        stmt = stmt.where(Club.level == level)
    result = await db.execute(stmt.order_by(Club.reputation.desc(), Club.name))
    return list(result.scalars().all())


@router.get("/{club_id}", response_model=ClubRead)
async def get_club(
    club_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Club:
    club = await db.get(Club, club_id)
    if not club:
        raise NotFoundError(f"Club {club_id} not found")
    return club
