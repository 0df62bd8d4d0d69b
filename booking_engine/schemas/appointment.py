from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date, time
from uuid import UUID
from booking_engine.models.appointment import AppointmentStatus, REASON_MAX_LENGTH
from booking_engine.scheduling import TimeOfDay


def _parse_time(value):
    if isinstance(value, str):
        return TimeOfDay.parse(value).to_time()
    return value


class AppointmentBase(BaseModel):
    """Base appointment schema."""
    appointment_date: date = Field(..., description="Appointment date (YYYY-MM-DD)")
    start_time: time = Field(..., description="Start time (HH:MM:SS)")

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start(cls, value):
        return _parse_time(value)


class AppointmentCreate(AppointmentBase):
    """Schema for booking an appointment."""
    reason: str = Field(..., min_length=1, max_length=REASON_MAX_LENGTH)
    notes: str | None = Field(None, description="Optional notes")
    phone: str | None = Field(None, max_length=20, description="Contact phone to store on the member")


class AppointmentValidate(AppointmentBase):
    """Schema for a dry-run validation request."""
    pass


class AppointmentReschedule(BaseModel):
    """Schema for moving an appointment to another slot."""
    appointment_date: date
    start_time: time

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start(cls, value):
        return _parse_time(value)


class AppointmentCancel(BaseModel):
    """Schema for cancelling an appointment."""
    reason: str = Field(..., min_length=1, description="Cancellation reason")


class AppointmentStatusUpdate(BaseModel):
    """Schema for an administrative status change."""
    status: AppointmentStatus


class AppointmentResponse(AppointmentBase):
    """Schema for appointment response."""
    id: UUID
    user_id: UUID
    end_time: time
    reason: str
    notes: str | None = None
    status: str
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AvailableSlots(BaseModel):
    """Schema for the slots still bookable on a date."""
    date: date
    slots: list[str]
    is_full_day_blocked: bool = False
    block_reason: str | None = None
