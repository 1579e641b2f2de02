"""
Reference Club Seeding
======================

Loads the reference clubs offered to the matching model (idempotent).
Run with: pitchscout clubs:seed
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout.models import Club, ClubMatch

logger = logging.getLogger(__name__)


CLUB_PROFILES: List[Dict[str, Any]] = [
    {
        "name": "Elite Youth Academy FC",
        "league": "Premier Development League",
        "level": "Elite",
        "playing_style": ["Possession-based", "High pressing"],
        "positions_needed": ["CM", "CB", "RW"],
        "age_preference": "16-19",
        "development_focus": True,
        "location": "England",
        "country": "England",
        "reputation": 85,
    },
    {
        "name": "Technical FC Academy",
        "league": "Championship Youth",
        "level": "Top Division",
        "playing_style": ["Technical football", "Build from back"],
        "positions_needed": ["CAM", "ST", "LB"],
        "age_preference": "17-21",
        "development_focus": True,
        "location": "Spain",
        "country": "Spain",
        "reputation": 78,
    },
    {
        "name": "Athletic Development Club",
        "league": "First Division U21",
        "level": "Championship",
        "playing_style": ["Direct play", "Counter-attacking"],
        "positions_needed": ["ST", "LW", "CDM"],
        "age_preference": "18-22",
        "development_focus": True,
        "location": "Germany",
        "country": "Germany",
        "reputation": 72,
    },
    {
        "name": "Rising Stars Academy",
        "league": "National Youth Premier",
        "level": "Development",
        "playing_style": ["Balanced", "Flexible formations"],
        "positions_needed": ["GK", "RB", "CM", "ST"],
        "age_preference": "15-18",
        "development_focus": True,
        "location": "France",
        "country": "France",
        "reputation": 65,
    },
    {
        "name": "Pro Path United",
        "league": "Professional Reserve League",
        "level": "Top Division",
        "playing_style": ["High intensity", "Pressing"],
        "positions_needed": ["CB", "CDM", "RW", "LW"],
        "age_preference": "19-23",
        "development_focus": False,
        "location": "Italy",
        "country": "Italy",
        "reputation": 80,
    },
]


async def seed_clubs(db: AsyncSession, force: bool = False) -> Dict[str, int]:
    """
    Insert missing reference clubs, or update existing ones by name.

    Args:
        force: Delete every club (and its matches) before loading

    Returns:
        dict with ``created`` and ``updated`` counts
    """
    if force:
        await db.execute(delete(ClubMatch))
        await db.execute(delete(Club))
        logger.info("Cleared existing clubs and club matches")

    result = await db.execute(select(Club))
    existing = {club.name: club for club in result.scalars().all()}

    created = updated = 0
    for profile in CLUB_PROFILES:
        club = existing.get(profile["name"])
        if club is None:
            db.add(Club(**profile))
            created += 1
        else:
            for field, value in profile.items():
                setattr(club, field, value)
            updated += 1

    await db.commit()
    logger.info(f"Club seed complete: created={created} updated={updated}")
    return {"created": created, "updated": updated}
