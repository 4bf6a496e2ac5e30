import calendar
import logging
import re
from dataclasses import dataclass, field, replace

from .calendar_utils import calendar_to_utc
from .errors import InvalidConfigurationError, MalformedInputError
from .hms import ClockOfDay
from .models import CalendarValue

logger = logging.getLogger(__name__)

_RULE_PATTERN = re.compile(r"M(\d{1,2})\.(\d)\.(\d)(?:/(?P<time>.*))?", re.ASCII)

DEFAULT_TRANSITION_TIME = ClockOfDay(2, 0, 0)


@dataclass
class TransitionRule:
    """
    One DST change rule from a POSIX timezone string, e.g. "M3.2.0/2:00:00":
    month 3, second week, Sunday, at 2 AM local standard time.

    A week of 5 means the last occurrence of that weekday in the month.

    The time of day is a `ClockOfDay`, so its hour is limited to -23..23.
    Extended POSIX times such as "/24" or "/26", found in some tzdata
    footers, are rejected as malformed.
    """

    month: int = 0  # 1..12
    week: int = 0  # 1..5 (5 = last)
    day_of_week: int = 0  # POSIX: Sunday=0 ... Saturday=6
    valid: bool = False
    time: ClockOfDay = field(default_factory=ClockOfDay)

    def clear(self) -> None:
        self.month = 0
        self.week = 0
        self.day_of_week = 0
        self.valid = False
        self.time.clear()

    def parse(self, text: str) -> bool:
        try:
            parsed = self.read(text)
        except MalformedInputError as exc:
            logger.debug("Clearing transition rule: %s", exc)
            self.clear()
            return False

        self.month = parsed.month
        self.week = parsed.week
        self.day_of_week = parsed.day_of_week
        self.valid = True
        self.time = parsed.time
        return True

    @classmethod
    def read(cls, text: str) -> "TransitionRule":
        match = _RULE_PATTERN.fullmatch(text)
        if match is None:
            raise MalformedInputError(f"Invalid dst start/end rule: {text!r}")

        month, week, day_of_week = (int(x) for x in match.groups()[:3])
        if not (1 <= month <= 12 and 1 <= week <= 5 and 0 <= day_of_week <= 6):
            raise MalformedInputError(f"Invalid M<m>.<w>.<d>: {text!r}")

        time_text = match.group("time")
        if time_text is None:
            time = replace(DEFAULT_TRANSITION_TIME)
        else:
            time = ClockOfDay.read(time_text)

        return cls(month, week, day_of_week, True, time)

    def validate(self) -> None:
        """
        Check that the fields of a valid rule are in range, so it can be
        calculated. Rules built by hand may skip `read` and its checks.
        """
        if not self.valid:
            raise InvalidConfigurationError("Transition rule is not valid")

        month, week, day_of_week = self.month, self.week, self.day_of_week
        if not (1 <= month <= 12 and 1 <= week <= 5 and 0 <= day_of_week <= 6):
            raise InvalidConfigurationError(
                f"Invalid M<m>.<w>.<d>: M{month}.{week}.{day_of_week}"
            )

        time = self.time
        if not (
            abs(time.hour) <= 23 and 0 <= time.minute < 60 and 0 <= time.second < 60
        ):
            raise InvalidConfigurationError(f"Invalid transition time: {time}")

    def local_date(self, year: int) -> CalendarValue:
        """
        Calendar value of this rule's occurrence in `year`, with the time of
        day set from the rule and no offset applied.
        """
        if not self.valid:
            raise InvalidConfigurationError("Transition rule is not valid")

        # Weekday of the 1st, via the calendar delegate
        first_of_month = CalendarValue(year=year, month=self.month, day=1)
        calendar_to_utc(first_of_month)

        day = 1 + (self.day_of_week - first_of_month.weekday) % 7
        if self.week < 5:
            day += 7 * (self.week - 1)
        else:
            days_in_month = calendar.monthrange(year, self.month)[1]
            while day + 7 <= days_in_month:
                day += 7

        value = CalendarValue(year=year, month=self.month, day=day)
        self.time.to_calendar_value(value)
        return value

    def calculate(
        self, year_context: CalendarValue | int, local_offset: ClockOfDay
    ) -> int:
        """
        UTC instant of this rule's occurrence in the year of `year_context`.

        `local_offset` is the POSIX offset (positive west of UTC) of the
        local clock the rule's time of day is read on: the standard offset
        for the start of DST, the DST offset for the return to standard time.
        """
        if isinstance(year_context, CalendarValue):
            year = year_context.year
        else:
            year = year_context
        value = self.local_date(year)

        # local + POSIX offset = UTC; calendar_to_utc carries any overflow
        local_offset.adjust_calendar_value(value)
        instant = calendar_to_utc(value)
        logger.debug("%s in %d occurs at %d", self, year, instant)
        return instant

    def __str__(self) -> str:
        return f"M{self.month}.{self.week}.{self.day_of_week}/{self.time}"
