import uuid
from datetime import datetime, date, time
from enum import Enum
from sqlalchemy import String, DateTime, Date, Time, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from booking_engine.database import Base


class BlockType(str, Enum):
    """Stored block types. A "period" request expands to FULL_DAY rows."""
    FULL_DAY = "full_day"
    TIME_SLOT = "time_slot"


class BlockedSlot(Base):
    """A date, or a window within a date, closed to booking by an administrator."""

    __tablename__ = "blocked_slots"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    blocked_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    block_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
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
        return f"<BlockedSlot {self.blocked_date} {self.block_type}>"
