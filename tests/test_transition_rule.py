from datetime import datetime, timezone

import pytest

from posix_localtime.errors import InvalidConfigurationError, MalformedInputError
from posix_localtime.hms import ClockOfDay
from posix_localtime.models import CalendarValue
from posix_localtime.transition_rule import TransitionRule


def _ts(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


def _rule(month, week, day_of_week, hour=0, minute=0, second=0) -> TransitionRule:
    return TransitionRule(
        month, week, day_of_week, True, ClockOfDay(hour, minute, second)
    )


# -------------------------
# Parsing and formatting
# -------------------------


@pytest.mark.parametrize(
    "text, expected",
    [
        ("M3.2.0/2:00:00", _rule(3, 2, 0, 2)),
        ("M3.2.0/2", _rule(3, 2, 0, 2)),
        ("M3.2.0", _rule(3, 2, 0, 2)),  # POSIX default time is 02:00:00
        ("M10.5.0/3", _rule(10, 5, 0, 3)),
        ("M11.1.0/1:30", _rule(11, 1, 0, 1, 30)),
        ("M3.5.0/-1", _rule(3, 5, 0, -1)),
        ("M12.4.6/23:59:59", _rule(12, 4, 6, 23, 59, 59)),
    ],
)
def test_parse(text, expected):
    rule = TransitionRule()
    assert rule.parse(text)
    assert rule == expected


@pytest.mark.parametrize(
    "text, canonical",
    [
        ("M3.2.0", "M3.2.0/2:00:00"),
        ("M11.1.0/2:0:0", "M11.1.0/2:00:00"),
        ("M3.5.0/-1", "M3.5.0/-1:00:00"),
        ("M10.5.0/0", "M10.5.0/0:00:00"),
    ],
)
def test_str_is_canonical(text, canonical):
    assert str(TransitionRule.read(text)) == canonical
    assert TransitionRule.read(canonical) == TransitionRule.read(text)


@pytest.mark.parametrize(
    "bad",
    [
        "M13.1.0",
        "M0.1.0",
        "M5.6.0",
        "M5.0.0",
        "M5.1.7",
        "J60",
        "60",
        "M3.2",
        "M3.2.0/25",
        "M3.2.0/",
        "garbage",
        "",
    ],
)
def test_parse_malformed_clears(bad):
    rule = TransitionRule.read("M3.2.0/2:00:00")
    assert not rule.parse(bad)
    assert rule == TransitionRule()
    assert not rule.valid

    with pytest.raises(MalformedInputError):
        TransitionRule.read(bad)


# -------------------------
# Occurrence of the rule in a given year (local, no offset)
# -------------------------


@pytest.mark.parametrize(
    "rule, year, expected",
    [
        (_rule(6, 1, 1), 2025, datetime(2025, 6, 2, 0, 0, 0)),
        (_rule(1, 1, 0), 2025, datetime(2025, 1, 5, 0, 0, 0)),
        (_rule(3, 2, 0, 2), 2025, datetime(2025, 3, 9, 2, 0, 0)),
        (_rule(11, 1, 0, 2), 2025, datetime(2025, 11, 2, 2, 0, 0)),
        (_rule(3, 2, 0, 2), 2026, datetime(2026, 3, 8, 2, 0, 0)),
        (_rule(11, 1, 0, 2), 2026, datetime(2026, 11, 1, 2, 0, 0)),
        # First Monday of Feb 2025
        (_rule(2, 1, 1), 2025, datetime(2025, 2, 3, 0, 0, 0)),
        # First Tuesday of July 2025 is the 1st; hour/min/sec honored
        (_rule(7, 1, 2, 6, 30, 15), 2025, datetime(2025, 7, 1, 6, 30, 15)),
    ],
)
def test_local_date(rule, year, expected):
    assert rule.local_date(year).to_datetime() == expected


@pytest.mark.parametrize(
    "rule, year, expected_day",
    [
        # Last Sunday of Oct 2025 is the 4th one
        (_rule(10, 5, 0), 2025, 26),
        # Last Monday of May 2025
        (_rule(5, 5, 1), 2025, 26),
        # Oct 2021 has five Sundays, the last is the 31st
        (_rule(10, 5, 0), 2021, 31),
        # Feb 2021 has exactly four Sundays: must not spill into March
        (_rule(2, 5, 0), 2021, 28),
        # Feb 2024 (leap year) has five Thursdays
        (_rule(2, 5, 4), 2024, 29),
    ],
)
def test_last_week_sentinel(rule, year, expected_day):
    value = rule.local_date(year)
    assert value.month == rule.month
    assert value.day == expected_day


def test_local_date_negative_time_is_not_normalized():
    value = _rule(3, 5, 0, -1).local_date(2023)
    assert (value.month, value.day, value.hour) == (3, 26, -1)


# -------------------------
# UTC instant of the transition
# -------------------------


@pytest.mark.parametrize(
    "text, year, offset, expected",
    [
        # EST5EDT 2021: DST starts 2 AM EST, ends 2 AM EDT
        ("M3.2.0/2:00:00", 2021, "5", _ts(2021, 3, 14, 7, 0, 0)),
        ("M11.1.0/2:00:00", 2021, "4", _ts(2021, 11, 7, 6, 0, 0)),
        # CET-1CEST: both transitions at 01:00 UTC
        ("M3.5.0", 2021, "-1", _ts(2021, 3, 28, 1, 0, 0)),
        ("M10.5.0/3", 2021, "-2", _ts(2021, 10, 31, 1, 0, 0)),
        # AEST-10AEDT: lands on the previous UTC day
        ("M10.1.0", 2021, "-10", _ts(2021, 10, 2, 16, 0, 0)),
        ("M4.1.0/3", 2021, "-11", _ts(2021, 4, 3, 16, 0, 0)),
        # <-02>2<-01>: 23:00 local on the day before the last Sunday
        ("M3.5.0/-1", 2023, "2", _ts(2023, 3, 26, 1, 0, 0)),
        ("M10.5.0/0", 2023, "1", _ts(2023, 10, 29, 1, 0, 0)),
        # Half-hour offset
        ("M4.1.0/2:30", 2021, "-5:30", _ts(2021, 4, 3, 21, 0, 0)),
    ],
)
def test_calculate(text, year, offset, expected):
    rule = TransitionRule.read(text)
    assert rule.calculate(year, ClockOfDay.read(offset)) == expected


def test_calculate_accepts_calendar_value_year():
    rule = TransitionRule.read("M3.2.0/2:00:00")
    context = CalendarValue(year=2021, month=8, day=15, hour=13)
    assert rule.calculate(context, ClockOfDay(5)) == _ts(2021, 3, 14, 7, 0, 0)


def test_calculate_invalid_rule():
    with pytest.raises(InvalidConfigurationError):
        TransitionRule().calculate(2021, ClockOfDay(5))


# -------------------------
# Validation of hand-built rules
# -------------------------


def test_validate_accepts_parsed_rule():
    TransitionRule.read("M3.5.0/-1").validate()


@pytest.mark.parametrize(
    "rule",
    [
        TransitionRule(),
        TransitionRule(valid=True),
        _rule(0, 1, 0),
        _rule(3, 6, 0),
        _rule(3, 2, -1),
        _rule(3, 2, 0, 24),
        _rule(3, 2, 0, 2, -1),
        _rule(3, 2, 0, 2, 0, 60),
    ],
)
def test_validate_rejects_out_of_range(rule):
    with pytest.raises(InvalidConfigurationError):
        rule.validate()


@pytest.mark.parametrize("text", ["M9.1.6/24", "M4.1.6/24", "M3.4.4/26"])
def test_extended_hours_are_malformed(text):
    # Times past 23:59:59 from newer tzdata footers are not supported
    assert not TransitionRule().parse(text)
