"""Pure scheduling helpers: time-of-day arithmetic, slot grid, availability filter."""

from .timeofday import TimeOfDay
from .slots import Slot, generate_slots, calculate_end_time
from .availability import DayAvailability, compute_availability

__all__ = [
    "TimeOfDay",
    "Slot",
    "generate_slots",
    "calculate_end_time",
    "DayAvailability",
    "compute_availability",
]
