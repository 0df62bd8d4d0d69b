"""Notification service - Queue outgoing emails for the delivery worker."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.exceptions import BookingValidationError
from booking_engine.models.appointment import Appointment
from booking_engine.models.email_queue import EmailQueue, EmailStatus
from booking_engine.models.user import User
from booking_engine.schemas.settings import BusinessSettings
from booking_engine.schemas.validation import ValidationCode

logger = logging.getLogger(__name__)


class NotificationService:
    """Service class for the email queue. Delivery happens elsewhere."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def queue_email(
        self,
        to_email: str,
        subject: str,
        body: str,
        email_type: str,
        to_name: str | None = None,
        appointment_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> EmailQueue:
        """Add an email to the queue in pending state."""
        email = EmailQueue(
            to_email=to_email,
            to_name=to_name,
            subject=subject,
            body=body,
            email_type=email_type,
            appointment_id=appointment_id,
            user_id=user_id,
            status=EmailStatus.PENDING.value,
        )
        self.db.add(email)
        await self.db.flush()
        logger.debug("Queued %s email for %s", email_type, to_email)
        return email

    async def send_appointment_confirmation(
        self, user: User, appointment: Appointment, business: BusinessSettings
    ) -> EmailQueue:
        when = f"{appointment.appointment_date.strftime('%d/%m/%Y')} at {appointment.start_time.strftime('%H:%M')}"
        return await self.queue_email(
            to_email=user.email,
            to_name=user.name,
            subject=f"Appointment confirmed - {business.institution_name}",
            body=(
                f"Hello {user.name}, your appointment on {when} "
                f"({appointment.reason}) is confirmed."
            ),
            email_type="appointment_confirmation",
            appointment_id=appointment.id,
            user_id=user.id,
        )

    async def send_appointment_cancellation(
        self, user: User, appointment: Appointment, business: BusinessSettings
    ) -> EmailQueue:
        when = f"{appointment.appointment_date.strftime('%d/%m/%Y')} at {appointment.start_time.strftime('%H:%M')}"
        return await self.queue_email(
            to_email=user.email,
            to_name=user.name,
            subject=f"Appointment cancelled - {business.institution_name}",
            body=(
                f"Hello {user.name}, your appointment on {when} was cancelled. "
                f"Reason: {appointment.cancellation_reason}"
            ),
            email_type="appointment_cancellation",
            appointment_id=appointment.id,
            user_id=user.id,
        )

    async def send_custom_notification(self, appointment_id: UUID, message: str) -> EmailQueue:
        """Queue an administrator's message to the owner of an appointment."""
        appointment = await self.db.get(Appointment, appointment_id)
        if appointment is None:
            raise BookingValidationError(ValidationCode.NOT_FOUND, "Appointment not found")

        user = await self.db.get(User, appointment.user_id)
        return await self.queue_email(
            to_email=user.email,
            to_name=user.name,
            subject="Notice about your appointment",
            body=f"Hello {user.name},\n\n{message}",
            email_type="custom_notification",
            appointment_id=appointment.id,
            user_id=user.id,
        )

    async def send_daily_report(
        self,
        report_date: date,
        rows: list[tuple[Appointment, User]],
        recipients: list[str],
        business: BusinessSettings,
    ) -> list[EmailQueue]:
        """Queue the list of a day's confirmed appointments, one email per recipient."""
        lines = [
            f"{appointment.start_time.strftime('%H:%M')} - {user.name} ({user.email}): {appointment.reason}"
            for appointment, user in rows
        ]
        subject = f"Appointments for {report_date.strftime('%d/%m/%Y')} - {business.institution_name}"
        body = f"{len(rows)} confirmed appointment(s):\n\n" + "\n".join(lines)

        emails = []
        for recipient in recipients:
            emails.append(
                await self.queue_email(
                    to_email=recipient,
                    to_name=business.sender_name,
                    subject=subject,
                    body=body,
                    email_type="daily_report",
                )
            )
        return emails
