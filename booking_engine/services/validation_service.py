"""Appointment validation service - Business rules for booking and cancelling.

Every check reads point-in-time state (settings, appointments, blocks, quota
ledger) and returns a ``ValidationFailure`` or ``None``; nothing here writes.
The slot check is a pre-check only: the unique index on confirmed
(appointment_date, start_time) is what actually prevents double-booking.
"""

import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Callable
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.models.blocked_slot import BlockedSlot
from booking_engine.scheduling import (
    DayAvailability,
    TimeOfDay,
    calculate_end_time,
    compute_availability,
    generate_slots,
)
from booking_engine.schemas.settings import BusinessSettings
from booking_engine.schemas.validation import (
    ValidationCode,
    ValidationFailure,
    ValidationResult,
    ValidationSuccess,
)
from booking_engine.services.quota_service import QuotaLedger
from booking_engine.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing ``day``."""
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


class AppointmentValidationService:
    """Service class for appointment rule checks."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock
        self.settings_service = SettingsService(db)
        self.ledger = QuotaLedger(db, clock=clock)

    async def _settings(self) -> BusinessSettings:
        return await self.settings_service.get_system_settings()

    async def validate_date_time(
        self,
        appointment_date: date,
        start_time: str | time | TimeOfDay,
        user_id: UUID | None = None,
    ) -> ValidationFailure | None:
        """Check calendar and clock rules for a requested date/time."""
        now = self.clock()
        today = now.date()

        if appointment_date <= today:
            return ValidationFailure(
                message="Booking for today or a past date is not allowed",
                code=ValidationCode.PAST_DATE,
            )

        if appointment_date.weekday() >= 5:
            return ValidationFailure(
                message="Appointments are not available on weekends",
                code=ValidationCode.WEEKEND,
            )

        business = await self._settings()
        start = TimeOfDay.parse(start_time)
        if start < business.work_start or start >= business.work_end:
            return ValidationFailure(
                message=f"Available hours: {business.work_start} to {business.work_end}",
                code=ValidationCode.OUTSIDE_WORKING_HOURS,
            )

        current = TimeOfDay.parse(now.time().replace(microsecond=0))
        if current >= business.after_hours_cutoff and appointment_date == today + timedelta(days=1):
            return ValidationFailure(
                message=f"Next-day bookings are not accepted after {business.after_hours_cutoff}",
                code=ValidationCode.AFTER_HOURS_NEXT_DAY,
            )

        return None

    async def validate_booking_horizon(self, appointment_date: date) -> ValidationFailure | None:
        """Reject dates further ahead than the advance-booking window."""
        business = await self._settings()
        last_day = self.clock().date() + timedelta(days=business.max_advanced_booking_days)
        if appointment_date > last_day:
            return ValidationFailure(
                message=(
                    f"Appointments can be booked at most "
                    f"{business.max_advanced_booking_days} days in advance"
                ),
                code=ValidationCode.BEYOND_BOOKING_HORIZON,
            )
        return None

    async def validate_monthly_limit(self, user_id: UUID) -> ValidationFailure | None:
        """
        Enforce the monthly quota.

        Only confirmed appointments count towards the limit; a completed
        (attended) appointment closes booking for the rest of the month.
        """
        first, last = month_bounds(self.clock().date())
        result = await self.db.execute(
            select(Appointment.status).where(
                and_(
                    Appointment.user_id == user_id,
                    Appointment.appointment_date >= first,
                    Appointment.appointment_date <= last,
                )
            )
        )
        statuses = list(result.scalars().all())

        if AppointmentStatus.COMPLETED.value in statuses:
            return ValidationFailure(
                message="You have already been attended this month and cannot book again",
                code=ValidationCode.ALREADY_ATTENDED_THIS_MONTH,
            )

        active = statuses.count(AppointmentStatus.CONFIRMED.value)
        business = await self._settings()
        if active >= business.monthly_limit_per_user:
            return ValidationFailure(
                message=(
                    f"You already have {business.monthly_limit_per_user} active appointments "
                    f"this month. Cancel one to book another or wait for next month."
                ),
                code=ValidationCode.MONTHLY_LIMIT_EXCEEDED,
            )

        return None

    async def validate_cancellation_block(self, user_id: UUID) -> ValidationFailure | None:
        """Enforce the cool-down after the member's latest cancellation."""
        limit = await self.ledger.get(user_id)
        if limit is None or limit.last_cancellation_at is None:
            return None

        business = await self._settings()
        elapsed = (self.clock() - limit.last_cancellation_at).total_seconds()
        remaining = business.cancellation_blocking_hours * 3600 - elapsed
        if remaining > 0:
            remaining_minutes = math.ceil(remaining / 60)
            return ValidationFailure(
                message=f"You must wait {remaining_minutes} minutes before booking again",
                code=ValidationCode.CANCELLATION_BLOCK,
            )

        return None

    async def get_blocked_slots_for_date(self, appointment_date: date) -> list[BlockedSlot]:
        result = await self.db.execute(
            select(BlockedSlot).where(BlockedSlot.blocked_date == appointment_date)
        )
        return list(result.scalars().all())

    async def get_confirmed_appointments_for_date(
        self, appointment_date: date, exclude_appointment_id: UUID | None = None
    ) -> list[Appointment]:
        conditions = [
            Appointment.appointment_date == appointment_date,
            Appointment.status == AppointmentStatus.CONFIRMED.value,
        ]
        if exclude_appointment_id is not None:
            conditions.append(Appointment.id != exclude_appointment_id)

        result = await self.db.execute(
            select(Appointment).where(and_(*conditions)).order_by(Appointment.start_time)
        )
        return list(result.scalars().all())

    async def get_available_slots(
        self, appointment_date: date, exclude_appointment_id: UUID | None = None
    ) -> DayAvailability:
        """Get the start times still bookable on a date.

        ``exclude_appointment_id`` leaves one booking out of the taken set, so an
        appointment being moved does not occupy its own slot.
        """
        business = await self._settings()
        candidates = generate_slots(
            business.work_start,
            business.work_end,
            business.appointment_duration_minutes,
        )
        blocks = await self.get_blocked_slots_for_date(appointment_date)
        booked = await self.get_confirmed_appointments_for_date(appointment_date, exclude_appointment_id)
        return compute_availability(candidates, blocks, booked)

    async def is_slot_available(
        self,
        appointment_date: date,
        start_time: str | time | TimeOfDay,
        exclude_appointment_id: UUID | None = None,
    ) -> bool:
        availability = await self.get_available_slots(appointment_date, exclude_appointment_id)
        return TimeOfDay.parse(start_time) in availability.slots

    async def validate_appointment(
        self,
        appointment_date: date,
        start_time: str | time | TimeOfDay,
        user_id: UUID,
    ) -> ValidationResult:
        """Run every booking rule in order and stop at the first failure."""
        checks = (
            lambda: self.validate_date_time(appointment_date, start_time, user_id),
            lambda: self.validate_booking_horizon(appointment_date),
            lambda: self.validate_monthly_limit(user_id),
            lambda: self.validate_cancellation_block(user_id),
        )
        for check in checks:
            failure = await check()
            if failure is not None:
                logger.info(
                    "Booking rejected for %s on %s %s: %s",
                    user_id, appointment_date, start_time, failure.code.value,
                )
                return failure

        availability = await self.get_available_slots(appointment_date)
        if TimeOfDay.parse(start_time) not in availability.slots:
            logger.info("Slot %s %s is no longer available", appointment_date, start_time)
            return ValidationFailure(
                message="This time slot is no longer available",
                code=ValidationCode.SLOT_NOT_AVAILABLE,
            )

        return ValidationSuccess(available_slots=availability.slot_strings)

    def calculate_end_time(self, start_time: str | time | TimeOfDay, duration_minutes: int = 30) -> str:
        return calculate_end_time(start_time, duration_minutes)

    async def validate_cancellation_lead_time(self, appointment_id: UUID) -> ValidationFailure | None:
        """Self-service cancellation needs the configured notice before the start."""
        appointment = await self.db.get(Appointment, appointment_id)
        if appointment is None:
            return ValidationFailure(
                message="Appointment not found",
                code=ValidationCode.NOT_FOUND,
            )

        business = await self._settings()
        starts_at = datetime.combine(appointment.appointment_date, appointment.start_time)
        hours_until = (starts_at - self.clock()).total_seconds() / 3600
        min_lead = business.min_cancellation_lead_time_hours

        if hours_until < min_lead:
            return ValidationFailure(
                message=f"Cancellation is only allowed at least {min_lead} hours in advance",
                code=ValidationCode.CANCELLATION_LEAD_TIME_EXCEEDED,
            )

        return None
