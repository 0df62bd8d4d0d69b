"""Appointment routes - API endpoints for appointment operations."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request

from booking_engine.api.deps import DBSession, Clock, CurrentUser, AdminUser
from booking_engine.schemas.appointment import (
    AppointmentCreate,
    AppointmentValidate,
    AppointmentReschedule,
    AppointmentCancel,
    AppointmentStatusUpdate,
    AppointmentResponse,
    AvailableSlots,
)
from booking_engine.schemas.notification import CustomNotificationCreate, QueuedEmailResponse
from booking_engine.schemas.validation import ValidationFailure, ValidationSuccess
from booking_engine.services.appointment_service import AppointmentService
from booking_engine.services.notification_service import NotificationService
from booking_engine.services.validation_service import AppointmentValidationService

router = APIRouter()


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.get("/slots", response_model=AvailableSlots)
async def get_available_slots(date: date, db: DBSession, clock: Clock, user: CurrentUser):
    """Get the start times still bookable on a date."""
    service = AppointmentValidationService(db, clock=clock)
    availability = await service.get_available_slots(date)
    return AvailableSlots(
        date=date,
        slots=availability.slot_strings,
        is_full_day_blocked=availability.is_full_day_blocked,
        block_reason=availability.block_reason,
    )


@router.post("/validate", response_model=ValidationSuccess | ValidationFailure)
async def validate_appointment(data: AppointmentValidate, db: DBSession, clock: Clock, user: CurrentUser):
    """Run the booking rules without booking."""
    service = AppointmentValidationService(db, clock=clock)
    return await service.validate_appointment(data.appointment_date, data.start_time, user.id)


@router.post("/", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    appointment_data: AppointmentCreate,
    request: Request,
    db: DBSession,
    clock: Clock,
    user: CurrentUser,
):
    """Book an appointment for the calling member."""
    service = AppointmentService(db, clock=clock)
    return await service.create_appointment(user, appointment_data, _client_ip(request))


@router.get("/upcoming", response_model=list[AppointmentResponse])
async def get_upcoming_appointments(db: DBSession, clock: Clock, user: CurrentUser):
    """Get the calling member's upcoming appointments."""
    service = AppointmentService(db, clock=clock)
    return await service.get_upcoming_appointments(user.id)


@router.get("/history", response_model=list[AppointmentResponse])
async def get_appointment_history(db: DBSession, clock: Clock, user: CurrentUser, limit: int = 50):
    """Get the calling member's appointment history."""
    service = AppointmentService(db, clock=clock)
    return await service.get_user_appointments(user.id, limit)


@router.get("/day", response_model=list[AppointmentResponse])
async def get_daily_appointments(date: date, db: DBSession, clock: Clock, admin: AdminUser):
    """Get every appointment on a date."""
    service = AppointmentService(db, clock=clock)
    return await service.get_appointments_for_day(date)


@router.get("/calendar", response_model=list[AppointmentResponse])
async def get_calendar_appointments(
    start: date, end: date, db: DBSession, clock: Clock, admin: AdminUser
):
    """Get confirmed appointments in a date range."""
    if end < start:
        raise HTTPException(status_code=422, detail="end must not be before start")
    service = AppointmentService(db, clock=clock)
    return await service.get_calendar_appointments(start, end)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: UUID, db: DBSession, user: CurrentUser):
    """Get an appointment by ID."""
    service = AppointmentService(db)
    appointment = await service.get_appointment_by_id(appointment_id)

    if not appointment or (appointment.user_id != user.id and not user.is_admin):
        raise HTTPException(status_code=404, detail="Appointment not found")

    return appointment


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: UUID,
    data: AppointmentCancel,
    request: Request,
    db: DBSession,
    clock: Clock,
    user: CurrentUser,
):
    """Cancel an appointment (soft delete by changing status)."""
    service = AppointmentService(db, clock=clock)
    return await service.cancel_appointment(appointment_id, user, data.reason, _client_ip(request))


@router.post("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: UUID,
    data: AppointmentReschedule,
    request: Request,
    db: DBSession,
    clock: Clock,
    user: CurrentUser,
):
    """Move an appointment to another slot."""
    service = AppointmentService(db, clock=clock)
    return await service.reschedule_appointment(
        appointment_id, user, data.appointment_date, data.start_time, _client_ip(request)
    )


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    request: Request,
    db: DBSession,
    clock: Clock,
    admin: AdminUser,
):
    """Change an appointment's status (completed, no-show, ...)."""
    service = AppointmentService(db, clock=clock)
    return await service.update_status(appointment_id, data.status, admin, _client_ip(request))


@router.post("/{appointment_id}/notify", response_model=QueuedEmailResponse, status_code=202)
async def send_custom_notification(
    appointment_id: UUID,
    data: CustomNotificationCreate,
    db: DBSession,
    admin: AdminUser,
):
    """Queue a message from an administrator to the appointment's owner."""
    return await NotificationService(db).send_custom_notification(appointment_id, data.message)
