import uuid
from datetime import datetime, date, time
from enum import Enum
from sqlalchemy import String, DateTime, Date, Time, ForeignKey, Text, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from booking_engine.database import Base


class AppointmentStatus(str, Enum):
    """Appointment status enum."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


REASON_MAX_LENGTH = 100


class Appointment(Base):
    """Appointment model."""

    __tablename__ = "appointments"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    appointment_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    start_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
    )
    end_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
    )
    reason: Mapped[str] = mapped_column(String(REASON_MAX_LENGTH), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=AppointmentStatus.CONFIRMED.value,
        index=True,
    )
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )

    # Relationship
    user: Mapped["User"] = relationship("User", back_populates="appointments")

    # Prevent double-booking: one confirmed appointment per date+start time.
    # Cancelled/completed rows for the same slot are allowed to pile up.
    __table_args__ = (
        Index(
            "unique_confirmed_slot",
            "appointment_date",
            "start_time",
            unique=True,
            sqlite_where=text("status = 'confirmed'"),
            postgresql_where=text("status = 'confirmed'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Appointment {self.appointment_date} {self.start_time}>"
