from booking_engine.schemas.user import UserIdentify, UserResponse
from booking_engine.schemas.appointment import (
    AppointmentCreate,
    AppointmentValidate,
    AppointmentReschedule,
    AppointmentCancel,
    AppointmentStatusUpdate,
    AppointmentResponse,
    AvailableSlots,
)
from booking_engine.schemas.block import BlockCreate, BlockRequestType, BlockResponse, PublicBlock
from booking_engine.schemas.settings import BusinessSettings, SettingsUpdate
from booking_engine.schemas.notification import CustomNotificationCreate, QueuedEmailResponse
from booking_engine.schemas.validation import (
    ValidationCode,
    ValidationFailure,
    ValidationSuccess,
    ValidationResult,
)

__all__ = [
    "UserIdentify",
    "UserResponse",
    "AppointmentCreate",
    "AppointmentValidate",
    "AppointmentReschedule",
    "AppointmentCancel",
    "AppointmentStatusUpdate",
    "AppointmentResponse",
    "AvailableSlots",
    "BlockCreate",
    "BlockRequestType",
    "BlockResponse",
    "PublicBlock",
    "BusinessSettings",
    "SettingsUpdate",
    "CustomNotificationCreate",
    "QueuedEmailResponse",
    "ValidationCode",
    "ValidationFailure",
    "ValidationSuccess",
    "ValidationResult",
]
