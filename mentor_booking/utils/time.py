"""Time and datetime utilities."""

import re
from datetime import datetime, time, timezone

_TIME_OF_DAY = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)


def parse_time_of_day(value: time | str) -> time:
    """Parse a wall-clock time of day.

    Args:
        value: A naive ``time`` or an ``HH:MM`` / ``HH:MM:SS`` string

    Returns:
        Naive time object

    Raises:
        ValueError: If the value is not a valid naive time of day
    """
    if isinstance(value, time):
        if value.tzinfo is not None:
            raise ValueError(f"Time of day must not carry a timezone: {value}")
        return value

    if not isinstance(value, str) or not _TIME_OF_DAY.match(value.strip()):
        raise ValueError(f"Could not parse time of day: {value!r}")

    # fromisoformat rejects out-of-range parts such as 24:00 or 10:61
    return time.fromisoformat(value.strip())


def format_time_of_day(value: time) -> str:
    """Format a time of day as HH:MM, keeping seconds only when present."""
    if value.second or value.microsecond:
        return value.strftime("%H:%M:%S")
    return value.strftime("%H:%M")
