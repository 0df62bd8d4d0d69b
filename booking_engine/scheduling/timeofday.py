"""Time-of-day value type.

Working hours, slot starts and block windows are wall-clock times without a
date. They are kept as seconds since midnight so ordering and arithmetic do not
depend on string padding.
"""

from dataclasses import dataclass
from datetime import time

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Immutable wall-clock time with second precision."""

    seconds: int

    def __post_init__(self) -> None:
        if not 0 <= self.seconds < SECONDS_PER_DAY:
            raise ValueError(f"Time of day out of range: {self.seconds}s")

    @classmethod
    def parse(cls, value: "str | time | TimeOfDay") -> "TimeOfDay":
        """Build from ``HH:MM``, ``HH:MM:SS``, a ``datetime.time`` or another TimeOfDay."""
        if isinstance(value, TimeOfDay):
            return value
        if isinstance(value, time):
            return cls(value.hour * 3600 + value.minute * 60 + value.second)
        if isinstance(value, str):
            parts = value.strip().split(":")
            if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
                raise ValueError(f"Invalid time of day: {value!r}")
            hour, minute = int(parts[0]), int(parts[1])
            second = int(parts[2]) if len(parts) == 3 else 0
            if hour > 23 or minute > 59 or second > 59:
                raise ValueError(f"Invalid time of day: {value!r}")
            return cls(hour * 3600 + minute * 60 + second)
        raise TypeError(f"Cannot convert {type(value).__name__} to TimeOfDay")

    @property
    def hour(self) -> int:
        return self.seconds // 3600

    @property
    def minute(self) -> int:
        return (self.seconds % 3600) // 60

    @property
    def second(self) -> int:
        return self.seconds % 60

    def add_minutes(self, minutes: int) -> "TimeOfDay":
        """Shift forward by ``minutes``. Crossing midnight is an error."""
        return TimeOfDay(self.seconds + minutes * 60)

    def to_time(self) -> time:
        return time(self.hour, self.minute, self.second)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
