"""Report service - Daily summary of the next day's appointments for the institution."""

import logging
from datetime import date, datetime, timedelta
from typing import Callable

import logfire
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.models.email_queue import EmailQueue
from booking_engine.models.user import User
from booking_engine.services.notification_service import NotificationService
from booking_engine.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class ReportService:
    """Service class for the daily report, triggered by an external scheduler."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock
        self.settings_service = SettingsService(db)
        self.notifications = NotificationService(db)

    async def get_confirmed_with_users(self, day: date) -> list[tuple[Appointment, User]]:
        result = await self.db.execute(
            select(Appointment, User)
            .join(User, Appointment.user_id == User.id)
            .where(
                and_(
                    Appointment.appointment_date == day,
                    Appointment.status == AppointmentStatus.CONFIRMED.value,
                )
            )
            .order_by(Appointment.start_time)
        )
        return [(appointment, user) for appointment, user in result.all()]

    async def run_daily_report(self) -> list[EmailQueue]:
        """
        Queue tomorrow's confirmed appointments to the administrators.

        Nothing is queued when the report is disabled or tomorrow is empty.
        Without configured admin addresses the report goes to sender_email.
        """
        business = await self.settings_service.get_system_settings()
        if not business.daily_report_enabled:
            logger.info("Daily report disabled in settings")
            return []

        tomorrow = self.clock().date() + timedelta(days=1)
        rows = await self.get_confirmed_with_users(tomorrow)
        if not rows:
            logger.info("No appointments on %s, daily report skipped", tomorrow)
            return []

        recipients = business.admin_email_list or [business.sender_email]
        emails = await self.notifications.send_daily_report(tomorrow, rows, recipients, business)
        logfire.info("daily_report", date=str(tomorrow), appointments=len(rows), recipients=len(recipients))
        return emails
