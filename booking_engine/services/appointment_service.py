"""Appointment service - Booking, cancellation and rescheduling workflow."""

import logging
from datetime import date, datetime, time
from typing import Callable
from uuid import UUID

import logfire
from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.exceptions import BookingValidationError
from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.models.user import User
from booking_engine.scheduling import TimeOfDay
from booking_engine.schemas.appointment import AppointmentCreate
from booking_engine.schemas.validation import ValidationCode
from booking_engine.services.audit_service import AuditService
from booking_engine.services.notification_service import NotificationService
from booking_engine.services.quota_service import QuotaLedger
from booking_engine.services.settings_service import SettingsService
from booking_engine.services.validation_service import AppointmentValidationService, month_bounds

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "This time slot is no longer available"


class AppointmentService:
    """Service class for appointment operations.

    Writes are ordered so the appointment row lands first; the ledger, email
    queue and audit log are only touched once the insert has succeeded.
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = datetime.now,
        validator: AppointmentValidationService | None = None,
    ):
        self.db = db
        self.clock = clock
        self.validator = validator or AppointmentValidationService(db, clock=clock)
        self.settings_service = SettingsService(db)
        self.ledger = QuotaLedger(db, clock=clock)
        self.notifications = NotificationService(db)
        self.audit = AuditService(db)

    async def get_appointment_by_id(self, appointment_id: UUID) -> Appointment | None:
        """Get an appointment by ID."""
        return await self.db.get(Appointment, appointment_id)

    async def _get_for_update(self, appointment_id: UUID) -> Appointment:
        appointment = await self.get_appointment_by_id(appointment_id)
        if appointment is None:
            raise BookingValidationError(ValidationCode.NOT_FOUND, "Appointment not found")
        return appointment

    def _enters_current_month(self, old_date: date, new_date: date) -> bool:
        first, last = month_bounds(self.clock().date())
        return first <= new_date <= last and not first <= old_date <= last

    async def _flush_slot_write(self) -> None:
        """Flush a write that may claim a confirmed slot.

        The unique index on confirmed (date, start_time) is the final word on
        collisions; losing the race surfaces as SLOT_NOT_AVAILABLE.
        """
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.info("Slot collision rejected by the store: %s", exc.orig)
            raise BookingValidationError(
                ValidationCode.SLOT_NOT_AVAILABLE, SLOT_TAKEN_MESSAGE
            ) from exc

    async def create_appointment(
        self, user: User, appointment_data: AppointmentCreate, ip_address: str | None = None
    ) -> Appointment:
        """Validate and book an appointment for a member."""
        logfire.info(
            "create_appointment",
            user_id=str(user.id),
            date=str(appointment_data.appointment_date),
            time=str(appointment_data.start_time),
        )

        result = await self.validator.validate_appointment(
            appointment_data.appointment_date,
            appointment_data.start_time,
            user.id,
        )
        if not result.valid:
            raise BookingValidationError.from_failure(result)

        business = await self.settings_service.get_system_settings()
        start = TimeOfDay.parse(appointment_data.start_time)
        appointment = Appointment(
            user_id=user.id,
            appointment_date=appointment_data.appointment_date,
            start_time=start.to_time(),
            end_time=start.add_minutes(business.appointment_duration_minutes).to_time(),
            reason=appointment_data.reason,
            notes=appointment_data.notes,
            status=AppointmentStatus.CONFIRMED.value,
        )
        self.db.add(appointment)
        await self._flush_slot_write()

        if appointment_data.phone:
            user.phone = appointment_data.phone

        await self.ledger.increment(user.id)
        await self.notifications.send_appointment_confirmation(user, appointment, business)
        await self.audit.log_action(
            action="CREATE_APPOINTMENT",
            entity_type="appointment",
            user_id=user.id,
            entity_id=appointment.id,
            details=f"Appointment booked for {appointment.appointment_date.isoformat()} at {start}",
            ip_address=ip_address,
        )

        await self.db.flush()
        await self.db.refresh(appointment)
        return appointment

    async def cancel_appointment(
        self,
        appointment_id: UUID,
        actor: User,
        reason: str,
        ip_address: str | None = None,
    ) -> Appointment:
        """Cancel an appointment (soft delete by changing status).

        Members may only cancel their own appointments and must respect the
        lead time; administrators bypass both checks.
        """
        appointment = await self._get_for_update(appointment_id)

        if not actor.is_admin and appointment.user_id != actor.id:
            raise BookingValidationError(
                ValidationCode.FORBIDDEN, "You can only cancel your own appointments"
            )

        if appointment.status == AppointmentStatus.CANCELLED.value:
            raise BookingValidationError(
                ValidationCode.ALREADY_CANCELLED, "Appointment is already cancelled"
            )
        if appointment.status in (AppointmentStatus.COMPLETED.value, AppointmentStatus.NO_SHOW.value):
            raise BookingValidationError(
                ValidationCode.INVALID_STATUS_TRANSITION,
                f"A {appointment.status} appointment cannot be cancelled",
            )

        if not actor.is_admin:
            failure = await self.validator.validate_cancellation_lead_time(appointment_id)
            if failure is not None:
                raise BookingValidationError.from_failure(failure)

        logfire.info(
            "cancel_appointment",
            appointment_id=str(appointment_id),
            by_admin=actor.is_admin,
        )

        appointment.status = AppointmentStatus.CANCELLED.value
        appointment.cancelled_at = self.clock()
        appointment.cancellation_reason = reason
        await self.db.flush()

        await self.ledger.decrement(appointment.user_id)
        await self.ledger.stamp_cancellation(appointment.user_id)

        owner = await self.db.get(User, appointment.user_id)
        business = await self.settings_service.get_system_settings()
        await self.notifications.send_appointment_cancellation(owner, appointment, business)
        await self.audit.log_action(
            action="CANCEL_APPOINTMENT",
            entity_type="appointment",
            user_id=actor.id,
            entity_id=appointment.id,
            details=reason,
            ip_address=ip_address,
        )

        await self.db.flush()
        await self.db.refresh(appointment)
        return appointment

    async def reschedule_appointment(
        self,
        appointment_id: UUID,
        actor: User,
        new_date: date,
        new_start_time: time | str,
        ip_address: str | None = None,
    ) -> Appointment:
        """Move a confirmed appointment to another slot.

        The ledger is untouched since the same appointment moves, but a move
        into the current month from another one must still fit the monthly
        limit. The member's lead time applies to the slot being given up, and
        the appointment never blocks its own slot.
        """
        appointment = await self._get_for_update(appointment_id)

        if not actor.is_admin:
            if appointment.user_id != actor.id:
                raise BookingValidationError(
                    ValidationCode.FORBIDDEN, "You can only reschedule your own appointments"
                )
            failure = await self.validator.validate_cancellation_lead_time(appointment_id)
            if failure is not None:
                raise BookingValidationError.from_failure(failure)

        if appointment.status != AppointmentStatus.CONFIRMED.value:
            raise BookingValidationError(
                ValidationCode.INVALID_STATUS_TRANSITION,
                f"A {appointment.status} appointment cannot be rescheduled",
            )

        start = TimeOfDay.parse(new_start_time)
        failure = await self.validator.validate_date_time(new_date, start, appointment.user_id)
        if failure is None:
            failure = await self.validator.validate_booking_horizon(new_date)
        if failure is None and self._enters_current_month(appointment.appointment_date, new_date):
            # The move adds a confirmed appointment to the month the quota counts
            failure = await self.validator.validate_monthly_limit(appointment.user_id)
        if failure is not None:
            raise BookingValidationError.from_failure(failure)

        if not await self.validator.is_slot_available(new_date, start, exclude_appointment_id=appointment.id):
            raise BookingValidationError(ValidationCode.SLOT_NOT_AVAILABLE, SLOT_TAKEN_MESSAGE)

        business = await self.settings_service.get_system_settings()
        previous = f"{appointment.appointment_date.isoformat()} {TimeOfDay.parse(appointment.start_time)}"
        appointment.appointment_date = new_date
        appointment.start_time = start.to_time()
        appointment.end_time = start.add_minutes(business.appointment_duration_minutes).to_time()
        await self._flush_slot_write()

        await self.audit.log_action(
            action="RESCHEDULE_APPOINTMENT",
            entity_type="appointment",
            user_id=actor.id,
            entity_id=appointment.id,
            details=f"{previous} -> {new_date.isoformat()} {start}",
            ip_address=ip_address,
        )

        await self.db.flush()
        await self.db.refresh(appointment)
        return appointment

    async def update_status(
        self,
        appointment_id: UUID,
        status: AppointmentStatus,
        admin: User,
        ip_address: str | None = None,
    ) -> Appointment:
        """Administrative status change. Cancelled is terminal."""
        if status == AppointmentStatus.CANCELLED:
            return await self.cancel_appointment(
                appointment_id, admin, "Cancelled by administrator", ip_address
            )

        appointment = await self._get_for_update(appointment_id)
        if appointment.status == AppointmentStatus.CANCELLED.value:
            raise BookingValidationError(
                ValidationCode.INVALID_STATUS_TRANSITION,
                "A cancelled appointment cannot change status",
            )

        appointment.status = status.value
        # Moving back to confirmed can collide with a newer booking of the slot
        await self._flush_slot_write()

        await self.audit.log_action(
            action="UPDATE_STATUS",
            entity_type="appointment",
            user_id=admin.id,
            entity_id=appointment.id,
            details=f"Status changed to {status.value}",
            ip_address=ip_address,
        )

        await self.db.flush()
        await self.db.refresh(appointment)
        return appointment

    async def get_upcoming_appointments(self, user_id: UUID, limit: int = 10) -> list[Appointment]:
        """Get a member's confirmed appointments from today on."""
        result = await self.db.execute(
            select(Appointment)
            .where(
                and_(
                    Appointment.user_id == user_id,
                    Appointment.appointment_date >= self.clock().date(),
                    Appointment.status == AppointmentStatus.CONFIRMED.value,
                )
            )
            .order_by(Appointment.appointment_date, Appointment.start_time)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_user_appointments(self, user_id: UUID, limit: int = 50) -> list[Appointment]:
        """Get a member's appointment history, newest first."""
        result = await self.db.execute(
            select(Appointment)
            .where(Appointment.user_id == user_id)
            .order_by(Appointment.appointment_date.desc(), Appointment.start_time.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_appointments_for_day(self, day: date) -> list[Appointment]:
        """Get every appointment on a date regardless of status."""
        result = await self.db.execute(
            select(Appointment)
            .where(Appointment.appointment_date == day)
            .order_by(Appointment.start_time)
        )
        return list(result.scalars().all())

    async def get_calendar_appointments(self, start: date, end: date) -> list[Appointment]:
        """Get confirmed appointments in an inclusive date range."""
        result = await self.db.execute(
            select(Appointment)
            .where(
                and_(
                    Appointment.appointment_date >= start,
                    Appointment.appointment_date <= end,
                    Appointment.status == AppointmentStatus.CONFIRMED.value,
                )
            )
            .order_by(Appointment.appointment_date, Appointment.start_time)
        )
        return list(result.scalars().all())
