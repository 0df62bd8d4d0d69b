"""Services package - Business logic layer."""

from booking_engine.services.user_service import UserService
from booking_engine.services.settings_service import SettingsService
from booking_engine.services.quota_service import QuotaLedger
from booking_engine.services.validation_service import AppointmentValidationService
from booking_engine.services.appointment_service import AppointmentService
from booking_engine.services.block_service import BlockService
from booking_engine.services.notification_service import NotificationService
from booking_engine.services.audit_service import AuditService
from booking_engine.services.report_service import ReportService

__all__ = [
    "UserService",
    "SettingsService",
    "QuotaLedger",
    "AppointmentValidationService",
    "AppointmentService",
    "BlockService",
    "NotificationService",
    "AuditService",
    "ReportService",
]
