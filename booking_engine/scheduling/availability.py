"""
Availability Filtering

Removes from a day's slot grid every start time that is closed by an
administrator block or already held by a confirmed appointment.
"""

from dataclasses import dataclass, field
from datetime import time
from typing import Iterable, List, Optional, Protocol, Union

from .slots import Slot
from .timeofday import TimeOfDay

FULL_DAY = "full_day"


class BlockLike(Protocol):
    block_type: str
    start_time: Union[time, str]
    end_time: Union[time, str]
    reason: Optional[str]


class BookingLike(Protocol):
    start_time: Union[time, str]


@dataclass
class DayAvailability:
    slots: List[TimeOfDay] = field(default_factory=list)
    is_full_day_blocked: bool = False
    block_reason: Optional[str] = None

    @property
    def slot_strings(self) -> List[str]:
        return [str(s) for s in self.slots]


def _is_blocked(start: TimeOfDay, block: BlockLike) -> bool:
    if block.block_type == FULL_DAY:
        return True
    # Half-open window: a slot starting exactly at the block end is free
    return TimeOfDay.parse(block.start_time) <= start < TimeOfDay.parse(block.end_time)


def compute_availability(
    candidates: Iterable[Slot],
    blocks: Iterable[BlockLike],
    bookings: Iterable[BookingLike],
) -> DayAvailability:
    """
    Filters candidate slots for a single date.

    Args:
        candidates: slot grid for the day, in chronological order
        blocks: blocked-slot entries for that date
        bookings: confirmed appointments on that date

    Returns:
        DayAvailability with the remaining start times, whether a full-day
        block exists and, if so, its reason
    """
    blocks = list(blocks)
    taken = {TimeOfDay.parse(b.start_time) for b in bookings}
    full_day = next((b for b in blocks if b.block_type == FULL_DAY), None)

    available = [
        slot.start
        for slot in candidates
        if slot.start not in taken and not any(_is_blocked(slot.start, b) for b in blocks)
    ]

    return DayAvailability(
        slots=available,
        is_full_day_blocked=full_day is not None,
        block_reason=(full_day.reason or None) if full_day is not None else None,
    )
