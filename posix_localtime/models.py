from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Position(Enum):
    """
    Where an instant falls relative to the DST block of its year.
    """

    BEFORE_DST = 0
    IN_DST = 1
    AFTER_DST = 2
    NO_DST = 3


@dataclass
class CalendarValue:
    """
    Broken-down calendar value, the counterpart of a C ``struct tm``.

    Unlike ``struct tm`` the year is the full year and the month is 1-based.
    The weekday follows POSIX (Sunday=0 ... Saturday=6) and the year day is
    0-based (January 1 = 0). Field-level adjustments may leave hour, minute,
    and second out of range; ``calendar_to_utc`` normalizes them.
    """

    year: int = 1970
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0
    weekday: int = 4  # 1970-01-01 was a Thursday
    year_day: int = 0

    def to_datetime(self) -> datetime:
        """Naive datetime for this value; fields must already be in range."""
        return datetime(
            self.year, self.month, self.day, self.hour, self.minute, self.second
        )

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d} "
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )
