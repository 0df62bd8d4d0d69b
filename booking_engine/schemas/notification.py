from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID


class CustomNotificationCreate(BaseModel):
    """Schema for an administrator's message to an appointment's owner."""
    message: str = Field(..., min_length=1)


class QueuedEmailResponse(BaseModel):
    """Schema for an email placed in the outgoing queue."""
    id: UUID
    to_email: str
    subject: str
    email_type: str
    status: str
    appointment_id: UUID | None = None
    created_at: datetime

    class Config:
        from_attributes = True
