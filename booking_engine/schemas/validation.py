from enum import Enum
from typing import Literal
from pydantic import BaseModel, Field


class ValidationCode(str, Enum):
    """Machine-readable rejection codes."""
    PAST_DATE = "PAST_DATE"
    WEEKEND = "WEEKEND"
    OUTSIDE_WORKING_HOURS = "OUTSIDE_WORKING_HOURS"
    AFTER_HOURS_NEXT_DAY = "AFTER_HOURS_NEXT_DAY"
    BEYOND_BOOKING_HORIZON = "BEYOND_BOOKING_HORIZON"
    ALREADY_ATTENDED_THIS_MONTH = "ALREADY_ATTENDED_THIS_MONTH"
    MONTHLY_LIMIT_EXCEEDED = "MONTHLY_LIMIT_EXCEEDED"
    CANCELLATION_BLOCK = "CANCELLATION_BLOCK"
    SLOT_NOT_AVAILABLE = "SLOT_NOT_AVAILABLE"
    NOT_FOUND = "NOT_FOUND"
    CANCELLATION_LEAD_TIME_EXCEEDED = "CANCELLATION_LEAD_TIME_EXCEEDED"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    FORBIDDEN = "FORBIDDEN"


class ValidationFailure(BaseModel):
    """A rule rejected the request."""
    valid: Literal[False] = False
    message: str
    code: ValidationCode


class ValidationSuccess(BaseModel):
    """Every rule passed; carries the day's remaining slots for UI refresh."""
    valid: Literal[True] = True
    available_slots: list[str] = Field(default_factory=list)


ValidationResult = ValidationFailure | ValidationSuccess
