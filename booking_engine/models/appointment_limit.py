import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from booking_engine.database import Base


class AppointmentLimit(Base):
    """Quota ledger row - monthly booking counter and cancellation cool-down per user."""

    __tablename__ = "appointment_limits"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    monthly_limit: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    # YYYY-MM
    current_month: Mapped[str] = mapped_column(String(7), nullable=False)
    appointments_this_month: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_cancellation_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )

    def __repr__(self) -> str:
        return f"<AppointmentLimit {self.user_id} {self.current_month}={self.appointments_this_month}>"
