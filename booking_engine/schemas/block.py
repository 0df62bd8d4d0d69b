from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime, date, time
from uuid import UUID
from booking_engine.scheduling import TimeOfDay


class BlockRequestType(str, Enum):
    """Block kinds an administrator can request."""
    FULL_DAY = "full_day"
    TIME_SLOT = "time_slot"
    PERIOD = "period"


class BlockCreate(BaseModel):
    """Schema for creating a block."""
    blocked_date: date
    end_date: date | None = Field(None, description="Last day of a period block (inclusive)")
    start_time: time = time(0, 0)
    end_time: time = time(23, 59, 59)
    block_type: BlockRequestType
    reason: str = Field(..., min_length=1)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time(cls, value):
        if isinstance(value, str):
            return TimeOfDay.parse(value).to_time()
        return value

    @model_validator(mode="after")
    def check_ranges(self):
        if self.block_type == BlockRequestType.PERIOD:
            if self.end_date is None:
                raise ValueError("end_date is required for a period block")
            if self.end_date < self.blocked_date:
                raise ValueError("end_date must not be before blocked_date")
        if self.block_type == BlockRequestType.TIME_SLOT and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BlockResponse(BaseModel):
    """Schema for block response."""
    id: UUID
    blocked_date: date
    start_time: time
    end_time: time
    block_type: str
    reason: str
    created_by: UUID | None
    created_at: datetime

    class Config:
        from_attributes = True


class PublicBlock(BaseModel):
    """Block as shown to members on the month calendar."""
    day: int
    block_type: str
    reason: str
