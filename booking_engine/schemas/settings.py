from datetime import time
from pydantic import BaseModel, Field, field_validator

from booking_engine.scheduling import TimeOfDay


def _normalize_time(value: str | time) -> str:
    return str(TimeOfDay.parse(value))


class BusinessSettings(BaseModel):
    """Snapshot of the business parameters the validation rules read."""
    working_hours_start: str = "08:00:00"
    working_hours_end: str = "12:00:00"
    appointment_duration_minutes: int = Field(30, gt=0)
    monthly_limit_per_user: int = Field(2, ge=0)
    cancellation_blocking_hours: int = Field(2, ge=0)
    min_cancellation_lead_time_hours: int = Field(12, ge=0)
    max_advanced_booking_days: int = Field(30, gt=0)
    blocking_time_after_hours: str = "19:00:00"
    institution_name: str = "OAB/SC"
    sender_email: str = "noreply@oabsc.org.br"
    sender_name: str = "OAB/SC"
    admin_emails: str = ""
    daily_report_enabled: bool = True

    @field_validator(
        "working_hours_start",
        "working_hours_end",
        "blocking_time_after_hours",
        mode="before",
    )
    @classmethod
    def normalize_times(cls, value):
        return _normalize_time(value)

    @property
    def work_start(self) -> TimeOfDay:
        return TimeOfDay.parse(self.working_hours_start)

    @property
    def work_end(self) -> TimeOfDay:
        return TimeOfDay.parse(self.working_hours_end)

    @property
    def after_hours_cutoff(self) -> TimeOfDay:
        return TimeOfDay.parse(self.blocking_time_after_hours)

    @property
    def admin_email_list(self) -> list[str]:
        """Comma-separated admin_emails as a list, blanks dropped."""
        return [e.strip() for e in self.admin_emails.split(",") if e.strip()]

    class Config:
        from_attributes = True


class SettingsUpdate(BaseModel):
    """Schema for an administrator updating settings."""
    working_hours_start: str | None = None
    working_hours_end: str | None = None
    appointment_duration_minutes: int | None = Field(None, gt=0)
    monthly_limit_per_user: int | None = Field(None, ge=0)
    cancellation_blocking_hours: int | None = Field(None, ge=0)
    min_cancellation_lead_time_hours: int | None = Field(None, ge=0)
    max_advanced_booking_days: int | None = Field(None, gt=0)
    blocking_time_after_hours: str | None = None
    institution_name: str | None = None
    sender_email: str | None = None
    sender_name: str | None = None
    admin_emails: str | None = None
    daily_report_enabled: bool | None = None

    @field_validator(
        "working_hours_start",
        "working_hours_end",
        "blocking_time_after_hours",
        mode="before",
    )
    @classmethod
    def normalize_times(cls, value):
        if value is None:
            return value
        return _normalize_time(value)
