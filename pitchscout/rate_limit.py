"""
Daily Usage Limits
==================

Per-user, per-endpoint, per-UTC-day request counters stored in ``api_usage``.

A request is admitted only while the stored count is below the endpoint's
ceiling; the increment is a conditional UPDATE so concurrent requests can
never push the count past the ceiling. Rejected requests do not increment.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pitchscout.config import settings
from pitchscout.errors import UsageLimitExceeded
from pitchscout.models import AIEndpoint, ApiUsage

logger = logging.getLogger(__name__)


def default_limits() -> dict[AIEndpoint, int]:
    """Daily ceilings from settings, keyed by endpoint."""
    return {
        AIEndpoint.ANALYZE_VIDEO: settings.rate_limit_analyze_video,
        AIEndpoint.SCOUTING_REPORT: settings.rate_limit_scouting_report,
        AIEndpoint.CLUB_MATCHING: settings.rate_limit_club_matching,
        AIEndpoint.COACH_CHAT: settings.rate_limit_coach_chat,
    }


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass
class UsageStatus:
    """Outcome of a usage check."""
    allowed: bool
    current_count: int
    limit: int
    reset_at: datetime

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current_count)


class DailyUsageLimiter:
    """
    Database-backed daily request ceiling.

    Usage:
        limiter = DailyUsageLimiter()
        status = await limiter.enforce(db, user_id, AIEndpoint.COACH_CHAT)
    """

    def __init__(self, limits: Optional[dict[AIEndpoint, int]] = None):
        self.limits = limits or default_limits()

    def limit_for(self, endpoint: AIEndpoint) -> int:
        return self.limits[endpoint]

    async def check(
        self,
        db: AsyncSession,
        user_id: UUID,
        endpoint: AIEndpoint,
        today: Optional[date] = None,
    ) -> UsageStatus:
        """
        Admit and count one request if the user is below the ceiling.

        Returns:
            UsageStatus with ``allowed`` False when the ceiling is reached
        """
        today = today or utc_today()
        limit = self.limit_for(endpoint)
        reset_at = datetime.combine(today + timedelta(days=1), datetime.min.time(), tzinfo=timezone.utc)
        now = datetime.now(timezone.utc)

        if limit <= 0:
            return UsageStatus(False, 0, limit, reset_at)

        usage = await self._get_usage(db, user_id, endpoint, today)

        if usage is None:
            db.add(ApiUsage(
                user_id=user_id,
                endpoint=endpoint.value,
                usage_date=today,
                request_count=1,
                last_request_at=now,
            ))
            try:
                await db.commit()
                return UsageStatus(True, 1, limit, reset_at)
            except IntegrityError:
                # Another request created today's row first
                await db.rollback()
                usage = await self._get_usage(db, user_id, endpoint, today)
                if usage is None:
                    raise

        result = await db.execute(
            update(ApiUsage)
            .where(
                ApiUsage.id == usage.id,
                ApiUsage.request_count < limit,
            )
            .values(
                request_count=ApiUsage.request_count + 1,
                last_request_at=now,
            )
        )
        await db.commit()

        if result.rowcount == 0:
            return UsageStatus(False, max(usage.request_count, limit), limit, reset_at)

        current = await db.scalar(select(ApiUsage.request_count).where(ApiUsage.id == usage.id))
        return UsageStatus(True, current or 0, limit, reset_at)

    async def enforce(
        self,
        db: AsyncSession,
        user_id: UUID,
        endpoint: AIEndpoint,
        today: Optional[date] = None,
    ) -> UsageStatus:
        """Like ``check`` but raises UsageLimitExceeded when not allowed."""
        status = await self.check(db, user_id, endpoint, today)
        if not status.allowed:
            logger.warning(f"Daily limit reached for user={user_id} endpoint={endpoint.value} ({status.limit})")
            raise UsageLimitExceeded(endpoint.value, status.limit)
        return status

    async def _get_usage(
        self,
        db: AsyncSession,
        user_id: UUID,
        endpoint: AIEndpoint,
        today: date,
    ) -> Optional[ApiUsage]:
        stmt = select(ApiUsage).where(
            ApiUsage.user_id == user_id,
            ApiUsage.endpoint == endpoint.value,
            ApiUsage.usage_date == today,
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()


async def get_usage_for_day(db: AsyncSession, user_id: UUID, day: Optional[date] = None) -> list[ApiUsage]:
    """All counters of one user for one day."""
    stmt = (
        select(ApiUsage)
        .where(ApiUsage.user_id == user_id, ApiUsage.usage_date == (day or utc_today()))
        .order_by(ApiUsage.endpoint)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def prune_usage(db: AsyncSession, older_than_days: int) -> int:
    """Delete counters older than the given number of days. Returns rows removed."""
    cutoff = utc_today() - timedelta(days=older_than_days)
    result = await db.execute(delete(ApiUsage).where(ApiUsage.usage_date < cutoff))
    await db.commit()
    return result.rowcount or 0
