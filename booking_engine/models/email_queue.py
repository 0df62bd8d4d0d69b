import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import String, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from booking_engine.database import Base


class EmailStatus(str, Enum):
    """Delivery status, advanced by the external email worker."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class EmailQueue(Base):
    """Outgoing email waiting for the delivery worker."""

    __tablename__ = "email_queue"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    to_email: Mapped[str] = mapped_column(String(320), nullable=False)
    to_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    email_type: Mapped[str] = mapped_column(String(50), nullable=False)
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    user_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(10), default=EmailStatus.PENDING.value, index=True)
    retry_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
    )

    def __repr__(self) -> str:
        return f"<EmailQueue {self.email_type} -> {self.to_email}>"
