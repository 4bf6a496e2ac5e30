import logging
import re
from dataclasses import dataclass

from .errors import MalformedInputError
from .models import CalendarValue

logger = logging.getLogger(__name__)

_HMS_PATTERN = re.compile(
    r"(?P<sign>[+-])?(?P<h>\d{1,2})(?::(?P<m>\d{1,2})(?::(?P<s>\d{1,2}))?)?",
    re.ASCII,
)


@dataclass
class ClockOfDay:
    """
    An hour:minute:second value, used both for time of day and for
    UTC offsets.

    Only the hour carries a sign; minute and second are always 0..59.
    A value of "-1:30:00" therefore means minus one and a half hours.
    """

    hour: int = 0
    minute: int = 0
    second: int = 0

    def clear(self) -> None:
        self.hour = 0
        self.minute = 0
        self.second = 0

    def parse(self, text: str) -> bool:
        """
        Parse "H:MM:SS", "H:MM", or "H". On malformed input the value is
        cleared and False is returned.
        """
        try:
            parsed = self.read(text)
        except MalformedInputError as exc:
            logger.debug("Clearing clock of day: %s", exc)
            self.clear()
            return False

        self.hour, self.minute, self.second = (
            parsed.hour,
            parsed.minute,
            parsed.second,
        )
        return True

    @classmethod
    def read(cls, text: str) -> "ClockOfDay":
        match = _HMS_PATTERN.fullmatch(text)
        if match is None:
            raise MalformedInputError(f"{text!r} is not a valid H:MM:SS value")

        h, m, s = (int(v or 0) for v in match.group("h", "m", "s"))
        if h > 23:
            raise MalformedInputError(f"Hour must be in [-23, 23]: {text!r}")
        if not (0 <= m < 60 and 0 <= s < 60):
            raise MalformedInputError(f"Minutes/seconds must be in [0, 59]: {text!r}")

        if match.group("sign") == "-":
            if h == 0 and (m or s):
                # The sign lives on the hour, so -0:30 has no representation
                raise MalformedInputError(
                    f"Negative values need a non-zero hour: {text!r}"
                )
            h = -h

        return cls(h, m, s)

    @classmethod
    def from_seconds(cls, seconds: int) -> "ClockOfDay":
        magnitude = abs(seconds)
        h, rest = divmod(magnitude, 3600)
        m, s = divmod(rest, 60)
        if h > 23:
            raise MalformedInputError(
                f"{seconds} seconds is outside [-23:59:59, 23:59:59]"
            )
        if seconds < 0:
            if h == 0:
                raise MalformedInputError(
                    f"{seconds} seconds cannot be expressed with a signed hour"
                )
            h = -h
        return cls(h, m, s)

    def to_seconds(self) -> int:
        magnitude = abs(self.hour) * 3600 + self.minute * 60 + self.second
        return -magnitude if self.hour < 0 else magnitude

    def to_calendar_value(self, value: CalendarValue) -> None:
        """
        Set the hour, minute, and second fields of `value` to this time.
        A negative time applies its sign to every field, so the result
        needs `calendar_to_utc` to normalize.
        """
        value.hour = value.minute = value.second = 0
        self.adjust_calendar_value(value)

    def adjust_calendar_value(
        self, value: CalendarValue, subtract: bool = False
    ) -> None:
        """
        Add (or subtract) this offset to the hour, minute, and second fields
        of `value` in place.

        No carry is propagated: fields may end up negative or past 59/23.
        Pass the result through `calendar_to_utc` when a normalized value
        is needed.
        """
        sign = -1 if self.hour < 0 else 1
        if subtract:
            sign = -sign
        value.hour += sign * abs(self.hour)
        value.minute += sign * self.minute
        value.second += sign * self.second

    def __str__(self) -> str:
        sign = "-" if self.hour < 0 else ""
        return f"{sign}{abs(self.hour)}:{self.minute:02d}:{self.second:02d}"
