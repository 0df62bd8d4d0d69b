"""
Slot Generation

Derives the grid of bookable start times for a working day from the
configured window and appointment duration.
"""

from dataclasses import dataclass
from datetime import time
from typing import List, Union

from .timeofday import TimeOfDay


@dataclass(frozen=True)
class Slot:
    start: TimeOfDay
    end: TimeOfDay


def generate_slots(
    work_start: Union[TimeOfDay, str, time],
    work_end: Union[TimeOfDay, str, time],
    duration_minutes: int,
) -> List[Slot]:
    """
    Generates consecutive slots of ``duration_minutes`` covering the window.

    A slot is only included when it ends at or before ``work_end``, so a
    trailing partial slot is dropped.

    Returns:
        list[Slot] in chronological order
    """
    if duration_minutes <= 0:
        raise ValueError(f"Slot duration must be positive, got {duration_minutes}")

    window_start = TimeOfDay.parse(work_start)
    window_end = TimeOfDay.parse(work_end)
    step = duration_minutes * 60

    slots = []
    cursor = window_start.seconds
    while cursor + step <= window_end.seconds:
        slots.append(Slot(start=TimeOfDay(cursor), end=TimeOfDay(cursor + step)))
        cursor += step

    return slots


def calculate_end_time(start_time: Union[TimeOfDay, str, time], duration_minutes: int = 30) -> str:
    """Return ``start_time + duration_minutes`` as ``HH:MM:SS``.

    >>> calculate_end_time("10:45:00", 60)
    '11:45:00'
    """
    return str(TimeOfDay.parse(start_time).add_minutes(duration_minutes))
