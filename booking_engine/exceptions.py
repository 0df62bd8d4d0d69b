"""Domain exceptions raised by the booking workflow."""

from booking_engine.schemas.validation import ValidationCode, ValidationFailure


# HTTP status per rejection code; anything not listed is a plain 400
STATUS_BY_CODE = {
    ValidationCode.NOT_FOUND: 404,
    ValidationCode.FORBIDDEN: 403,
    ValidationCode.SLOT_NOT_AVAILABLE: 409,
}


class BookingValidationError(Exception):
    """A business rule rejected a booking, cancellation or status change."""

    def __init__(self, code: ValidationCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @classmethod
    def from_failure(cls, failure: ValidationFailure) -> "BookingValidationError":
        return cls(failure.code, failure.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE.get(self.code, 400)

    def __repr__(self) -> str:
        return f"<BookingValidationError {self.code.value}: {self.message}>"
