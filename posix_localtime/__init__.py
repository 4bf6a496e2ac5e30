from .calendar_utils import calendar_to_utc, current_utc_time, utc_to_calendar
from .converter import TimeConverter
from .errors import InvalidConfigurationError, MalformedInputError
from .hms import ClockOfDay
from .models import CalendarValue, Position
from .posix import TimezoneSpec
from .transition_rule import TransitionRule

__all__ = [
    "CalendarValue",
    "ClockOfDay",
    "InvalidConfigurationError",
    "MalformedInputError",
    "Position",
    "TimeConverter",
    "TimezoneSpec",
    "TransitionRule",
    "calendar_to_utc",
    "current_utc_time",
    "utc_to_calendar",
]
