import time
from datetime import date, datetime, timedelta, timezone

from .models import CalendarValue

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()


def utc_to_calendar(instant: int) -> CalendarValue:
    """
    Break a UTC instant (seconds since the epoch) into calendar fields,
    the equivalent of ``gmtime``.
    """
    dt = _EPOCH + timedelta(seconds=instant)
    return CalendarValue(
        year=dt.year,
        month=dt.month,
        day=dt.day,
        hour=dt.hour,
        minute=dt.minute,
        second=dt.second,
        # Python: Mon=0..Sun=6, POSIX: Sun=0..Sat=6
        weekday=(dt.weekday() + 1) % 7,
        year_day=dt.timetuple().tm_yday - 1,
    )


def calendar_to_utc(value: CalendarValue) -> int:
    """
    Convert calendar fields, interpreted as UTC, to seconds since the epoch,
    the equivalent of ``timegm``.

    Day, hour, minute, and second may be out of range (negative or past the
    end of their unit); they carry into the neighbouring fields. The weekday
    and year day of ``value`` are ignored on input; on output every field of
    ``value`` is rewritten in normalized form.
    """
    days = date(value.year, value.month, 1).toordinal() - _EPOCH_ORDINAL
    days += value.day - 1
    instant = days * 86400 + value.hour * 3600 + value.minute * 60 + value.second

    normalized = utc_to_calendar(instant)
    for name, field_value in vars(normalized).items():
        setattr(value, name, field_value)
    return instant


def current_utc_time() -> int:
    """Current UTC instant in whole seconds."""
    return int(time.time())
