import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from .errors import InvalidConfigurationError, MalformedInputError
from .hms import ClockOfDay
from .transition_rule import TransitionRule

logger = logging.getLogger(__name__)

_LOCAL_TZ_PATTERN = re.compile(
    r"""
    (?P<std>[a-zA-Z]{3,}|<[a-zA-Z0-9+-]+>)
    (?P<stdoff>[+-]?\d{1,2}(?::\d{1,2}(?::\d{1,2})?)?)
    (?:
        (?P<dst>[a-zA-Z]{3,}|<[a-zA-Z0-9+-]+>)
        (?P<dstoff>[+-]?\d{1,2}(?::\d{1,2}(?::\d{1,2})?)?)?
    )? # dst
    """,
    re.ASCII | re.VERBOSE,
)

_UNQUOTED_NAME = re.compile(r"[a-zA-Z]{3,}", re.ASCII)


def _format_name(name: str) -> str:
    return name if _UNQUOTED_NAME.fullmatch(name) else f"<{name}>"


@dataclass
class TimezoneSpec:
    """
    A POSIX timezone string such as "EST5EDT,M3.2.0/2:00:00,M11.1.0/2:00:00".

    - EST is the standard time name, 5 its offset
    - EDT is the daylight saving time name; its offset is omitted, so it is
      one hour less than the standard offset
    - M3.2.0/2:00:00 is when DST starts: second Sunday of March, 2 AM
    - M11.1.0/2:00:00 is when standard time starts: first Sunday of
      November, 2 AM

    Offsets keep the POSIX sign, which is backwards from the usual UTC
    offset: 5 means five hours *west* of UTC. `utc_offset_secs` and
    `dst_utc_offset_secs` give the conventional (east positive) values.
    """

    standard_name: str = ""
    standard_offset: ClockOfDay = field(default_factory=ClockOfDay)
    dst_name: str = ""
    dst_offset: ClockOfDay = field(default_factory=ClockOfDay)
    dst_start: TransitionRule = field(default_factory=TransitionRule)
    standard_start: TransitionRule = field(default_factory=TransitionRule)

    def clear(self) -> None:
        self.standard_name = ""
        self.standard_offset.clear()
        self.dst_name = ""
        self.dst_offset.clear()
        self.dst_start.clear()
        self.standard_start.clear()

    def parse(self, text: str) -> bool:
        try:
            parsed = self.read(text)
        except MalformedInputError as exc:
            logger.debug("Clearing timezone spec: %s", exc)
            self.clear()
            return False

        self.standard_name = parsed.standard_name
        self.standard_offset = parsed.standard_offset
        self.dst_name = parsed.dst_name
        self.dst_offset = parsed.dst_offset
        self.dst_start = parsed.dst_start
        self.standard_start = parsed.standard_start
        return True

    @classmethod
    def read(cls, text: str) -> "TimezoneSpec":
        local_tz, *rules = text.split(",")
        if len(rules) not in (0, 2):
            raise MalformedInputError(
                f"{text!r} must have either no rules or exactly two"
            )

        match = _LOCAL_TZ_PATTERN.fullmatch(local_tz)
        if match is None:
            raise MalformedInputError(f"{local_tz!r} is not a valid TZ string")

        tz = cls()
        tz.standard_name = match.group("std").strip("<>")
        tz.standard_offset = ClockOfDay.read(match.group("stdoff"))

        dst_name = match.group("dst")
        if dst_name is None:
            if rules:
                raise MalformedInputError(f"{text!r} has rules but no DST name")
            return tz

        dst_offset = match.group("dstoff")
        if dst_offset:
            dst_hms = ClockOfDay.read(dst_offset)
        else:
            dst_hms = ClockOfDay.from_seconds(tz.standard_offset.to_seconds() - 3600)

        if not rules:
            # No rules, no DST: the DST name and offset are dropped
            return tz

        tz.dst_name = dst_name.strip("<>")
        tz.dst_offset = dst_hms
        tz.dst_start = TransitionRule.read(rules[0])
        tz.standard_start = TransitionRule.read(rules[1])
        return tz

    @classmethod
    def from_environment(
        cls, var: str = "TZ", environ: Mapping[str, str] | None = None
    ) -> "TimezoneSpec | None":
        """
        Read a POSIX timezone string from an environment variable.

        Returns None when the variable is unset, empty, or holds a ":"
        zone reference (those name a tz database file, not a rule).
        """
        value = (os.environ if environ is None else environ).get(var)
        if not value or value.startswith(":"):
            return None
        return cls.read(value)

    def has_dst(self) -> bool:
        return self.dst_start.valid

    def validate(self) -> None:
        """
        Check that the DST rules can be used for calculation: both rules are
        valid with in-range fields, or neither is valid.
        """
        if self.dst_start.valid != self.standard_start.valid:
            raise InvalidConfigurationError(
                f"{self} has only one valid DST transition rule"
            )
        if self.has_dst():
            self.dst_start.validate()
            self.standard_start.validate()

    @property
    def utc_offset_secs(self) -> int:
        return -self.standard_offset.to_seconds()

    @property
    def dst_utc_offset_secs(self) -> int:
        return -self.dst_offset.to_seconds()

    @property
    def dst_difference_secs(self) -> int:
        if not self.has_dst():
            return 0
        return self.dst_utc_offset_secs - self.utc_offset_secs

    def __str__(self) -> str:
        result = f"{_format_name(self.standard_name)}{self.standard_offset}"
        if self.has_dst():
            result += (
                f"{_format_name(self.dst_name)}{self.dst_offset}"
                f",{self.dst_start},{self.standard_start}"
            )
        return result
