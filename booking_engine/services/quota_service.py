"""Quota ledger - Per-member monthly booking counter and cancellation cool-down."""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from sqlalchemy import select, update, case
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.appointment_limit import AppointmentLimit
from booking_engine.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class QuotaLedger:
    """Service class for appointment_limits rows.

    Counter updates are single UPDATE statements so concurrent requests for
    the same member do not lose writes; exact-once is not guaranteed.
    """

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock

    def current_month(self) -> str:
        return self.clock().strftime("%Y-%m")

    async def get(self, user_id: UUID) -> AppointmentLimit | None:
        """Get a member's ledger row without creating or rolling it over."""
        result = await self.db.execute(
            select(AppointmentLimit).where(AppointmentLimit.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: UUID) -> AppointmentLimit:
        """Get a member's ledger row, creating it or resetting a stale month."""
        month = self.current_month()
        limit = await self.get(user_id)

        if limit is None:
            business = await SettingsService(self.db).get_system_settings()
            limit = AppointmentLimit(
                user_id=user_id,
                monthly_limit=business.monthly_limit_per_user,
                current_month=month,
                appointments_this_month=0,
            )
            self.db.add(limit)
            await self.db.flush()
            await self.db.refresh(limit)
            return limit

        if limit.current_month != month:
            logger.debug("Ledger rollover for %s: %s -> %s", user_id, limit.current_month, month)
            limit.current_month = month
            limit.appointments_this_month = 0
            await self.db.flush()
            await self.db.refresh(limit)

        return limit

    async def _update(self, user_id: UUID, **values) -> AppointmentLimit:
        limit = await self.get_or_create(user_id)
        await self.db.execute(
            update(AppointmentLimit)
            .where(AppointmentLimit.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(limit)
        return limit

    async def increment(self, user_id: UUID) -> AppointmentLimit:
        """Count one more booking this month."""
        return await self._update(
            user_id,
            appointments_this_month=AppointmentLimit.appointments_this_month + 1,
        )

    async def decrement(self, user_id: UUID) -> AppointmentLimit:
        """Count one booking less this month, never going below zero."""
        column = AppointmentLimit.appointments_this_month
        return await self._update(
            user_id,
            appointments_this_month=case((column > 0, column - 1), else_=0),
        )

    async def stamp_cancellation(self, user_id: UUID) -> AppointmentLimit:
        """Start the post-cancellation cool-down from now."""
        return await self._update(user_id, last_cancellation_at=self.clock())
