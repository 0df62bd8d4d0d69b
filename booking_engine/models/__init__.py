from booking_engine.models.user import User, UserRole
from booking_engine.models.appointment import Appointment, AppointmentStatus
from booking_engine.models.blocked_slot import BlockedSlot, BlockType
from booking_engine.models.appointment_limit import AppointmentLimit
from booking_engine.models.system_settings import SystemSettings
from booking_engine.models.email_queue import EmailQueue, EmailStatus
from booking_engine.models.audit_log import AuditLog

__all__ = [
    "User",
    "UserRole",
    "Appointment",
    "AppointmentStatus",
    "BlockedSlot",
    "BlockType",
    "AppointmentLimit",
    "SystemSettings",
    "EmailQueue",
    "EmailStatus",
    "AuditLog",
]
