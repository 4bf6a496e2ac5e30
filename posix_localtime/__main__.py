import argparse
import logging
import sys

from .calendar_utils import utc_to_calendar
from .converter import TimeConverter
from .errors import MalformedInputError
from .posix import TimezoneSpec


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m posix_localtime",
        description="Convert a UTC instant to local time using a POSIX TZ string.",
    )
    parser.add_argument(
        "tz",
        nargs="?",
        help='POSIX timezone string, e.g. "EST5EDT,M3.2.0,M11.1.0" (default: $TZ)',
    )
    parser.add_argument(
        "--time",
        type=int,
        help="UTC instant in seconds since the epoch (default: now)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.tz is not None:
            config = TimezoneSpec.read(args.tz)
        else:
            config = TimezoneSpec.from_environment()
    except MalformedInputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if config is None:
        print("error: no timezone given and $TZ is not a POSIX string", file=sys.stderr)
        return 2

    converter = TimeConverter(config)
    if args.time is None:
        converter.with_current_time()
    else:
        converter.with_time(args.time)
    converter.convert()

    print(f"timezone : {config}")
    print(f"utc      : {utc_to_calendar(converter.time)}")
    print(f"local    : {converter.local_time} {converter.abbreviation}")
    print(f"position : {converter.position.name}")
    if converter.dst_start is not None:
        print(f"dst start: {converter.dst_start_calendar} UTC")
        print(f"std start: {converter.standard_start_calendar} UTC")
    return 0


if __name__ == "__main__":
    sys.exit(main())
