from datetime import datetime
from sqlalchemy import Boolean, String, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from booking_engine.database import Base


class SystemSettings(Base):
    """Singleton row of administrator-editable business parameters.

    Time-of-day columns hold zero-padded ``HH:MM:SS`` strings.
    """

    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    working_hours_start: Mapped[str] = mapped_column(String(8), default="08:00:00")
    working_hours_end: Mapped[str] = mapped_column(String(8), default="12:00:00")
    appointment_duration_minutes: Mapped[int] = mapped_column(Integer, default=30)
    monthly_limit_per_user: Mapped[int] = mapped_column(Integer, default=2)
    cancellation_blocking_hours: Mapped[int] = mapped_column(Integer, default=2)
    min_cancellation_lead_time_hours: Mapped[int] = mapped_column(Integer, default=12)
    max_advanced_booking_days: Mapped[int] = mapped_column(Integer, default=30)
    blocking_time_after_hours: Mapped[str] = mapped_column(String(8), default="19:00:00")
    institution_name: Mapped[str] = mapped_column(String(255), default="OAB/SC")
    sender_email: Mapped[str] = mapped_column(String(320), default="noreply@oabsc.org.br")
    sender_name: Mapped[str] = mapped_column(String(255), default="OAB/SC")
    admin_emails: Mapped[str] = mapped_column(Text, default="")
    daily_report_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )
