import logging
from collections.abc import Callable

from .calendar_utils import current_utc_time, utc_to_calendar
from .errors import InvalidConfigurationError
from .models import CalendarValue, Position
from .posix import TimezoneSpec

logger = logging.getLogger(__name__)


class TimeConverter:
    """
    Converts a UTC instant to local time using a POSIX timezone rule.

    Typical use::

        conv = TimeConverter(TimezoneSpec.read("EST5EDT,M3.2.0,M11.1.0"))
        conv.with_time(1625140800).convert()
        conv.is_dst(), conv.local_time

    Every call to `convert()` recomputes `position`, `local_time`, and the
    two transition instants from scratch. When the instant is in DST, or in
    standard time before DST begins, `dst_start` and `standard_start` are
    the transitions that bracket it, which for zones whose DST spans the
    new year may come from the previous or next calendar year.
    """

    def __init__(
        self,
        config: TimezoneSpec | None = None,
        clock: Callable[[], int] = current_utc_time,
    ) -> None:
        self.config = config if config is not None else TimezoneSpec()
        self.time = 0
        self._clock = clock
        self.position = Position.NO_DST
        self.local_time = CalendarValue()
        self.dst_start: int | None = None
        self.dst_start_calendar: CalendarValue | None = None
        self.standard_start: int | None = None
        self.standard_start_calendar: CalendarValue | None = None

    def with_config(self, config: TimezoneSpec) -> "TimeConverter":
        self.config = config
        return self

    def with_time(self, time: int) -> "TimeConverter":
        self.time = time
        return self

    def with_current_time(self) -> "TimeConverter":
        self.time = self._clock()
        return self

    def convert(self) -> "TimeConverter":
        self.dst_start = self.dst_start_calendar = None
        self.standard_start = self.standard_start_calendar = None
        self.position = self._compute_position()

        if self.position != Position.NO_DST:
            self.dst_start_calendar = utc_to_calendar(self.dst_start)
            self.standard_start_calendar = utc_to_calendar(self.standard_start)

        self.local_time = utc_to_calendar(self.time + self.utc_offset_secs)
        return self

    def _compute_position(self) -> Position:
        config = self.config
        if not config.has_dst():
            return Position.NO_DST

        try:
            config.validate()
            return self._classify()
        except InvalidConfigurationError as exc:
            logger.warning("Treating timezone as having no DST: %s", exc)
            self.dst_start = self.standard_start = None
            return Position.NO_DST

    def _classify(self) -> Position:
        year = utc_to_calendar(self.time).year
        dst_start, standard_start = self._transitions(year)

        if dst_start < standard_start:
            # DST begins and ends within the calendar year (northern hemisphere)
            self.dst_start, self.standard_start = dst_start, standard_start
            if self.time < dst_start:
                return Position.BEFORE_DST
            if self.time < standard_start:
                return Position.IN_DST
            return Position.AFTER_DST

        # DST spans the new year (southern hemisphere): the standard time
        # block sits between standard_start and dst_start and is reported as
        # BEFORE_DST, as it precedes the DST block starting at dst_start.
        if self.time < standard_start:
            self.dst_start = self._transitions(year - 1)[0]
            self.standard_start = standard_start
            return Position.IN_DST
        if self.time < dst_start:
            self.dst_start, self.standard_start = dst_start, standard_start
            return Position.BEFORE_DST
        self.dst_start = dst_start
        self.standard_start = self._transitions(year + 1)[1]
        return Position.IN_DST

    def _transitions(self, year: int) -> tuple[int, int]:
        config = self.config
        try:
            # The end of DST is read on the DST clock
            return (
                config.dst_start.calculate(year, config.standard_offset),
                config.standard_start.calculate(year, config.dst_offset),
            )
        except (OverflowError, ValueError) as exc:
            # Years outside datetime's 1..9999
            raise InvalidConfigurationError(
                f"Cannot calculate DST transitions for {year}: {exc}"
            ) from exc

    def is_dst(self) -> bool:
        return self.position == Position.IN_DST

    def is_standard_time(self) -> bool:
        return not self.is_dst()

    @property
    def utc_offset_secs(self) -> int:
        """Conventional (east positive) UTC offset in effect after `convert()`."""
        if self.is_dst():
            return self.config.dst_utc_offset_secs
        return self.config.utc_offset_secs

    @property
    def abbreviation(self) -> str:
        if self.is_dst():
            return self.config.dst_name
        return self.config.standard_name
