"""Slot arithmetic and the interval overlap predicate.

All slots are half-open ``[start, end)`` intervals on a single calendar
date. Conflicts are only ever considered per mentor per day.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from mentor_booking.booking.errors import InvalidWindowError
from mentor_booking.utils.time import format_time_of_day, parse_time_of_day

MINUTES_PER_DAY = 24 * 60


def intervals_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Check whether two half-open intervals share any instant.

    ``[s1, e1)`` and ``[s2, e2)`` overlap iff ``s1 < e2 and s2 < e1``. This
    covers partial overlap, containment and equality. Back-to-back intervals
    (``e1 == s2``) do not overlap, and an empty interval overlaps nothing.

    Examples:
        >>> intervals_overlap(time(9), time(9, 30), time(9, 30), time(10))
        False
        >>> intervals_overlap(time(9), time(9, 30), time(9, 15), time(9, 45))
        True
        >>> intervals_overlap(time(9), time(10), time(9, 15), time(9, 45))
        True
    """
    if start_a >= end_a or start_b >= end_b:
        return False
    return start_a < end_b and start_b < end_a


@dataclass(frozen=True)
class TimeWindow:
    """A bookable slot: half-open ``[start, end)`` on one date.

    Attributes:
        booking_date: Calendar date the slot belongs to
        start: Inclusive start time
        end: Exclusive end time, always later than start on the same date
    """

    booking_date: date
    start: time
    end: time

    @property
    def duration_minutes(self) -> int:
        delta = datetime.combine(self.booking_date, self.end) - datetime.combine(
            self.booking_date, self.start
        )
        return int(delta.total_seconds() // 60)

    def __str__(self) -> str:
        return (
            f"{self.booking_date.isoformat()} "
            f"[{format_time_of_day(self.start)}, {format_time_of_day(self.end)})"
        )


def validate_request_window(start_time: time | str, duration_minutes: int) -> time:
    """Check the raw window inputs before any lookup happens.

    Returns:
        Parsed start time

    Raises:
        InvalidWindowError: If the duration is not a positive whole number of
            minutes or the start time is not a valid time of day
    """
    # bool is an int subclass; True minutes is not a duration
    if (
        isinstance(duration_minutes, bool)
        or not isinstance(duration_minutes, int)
        or duration_minutes <= 0
    ):
        raise InvalidWindowError(
            f"Duration must be a positive number of minutes, got {duration_minutes!r}"
        )

    try:
        return parse_time_of_day(start_time)
    except ValueError as e:
        raise InvalidWindowError(str(e)) from e


def compute_window(
    booking_date: date,
    start_time: time | str,
    duration_minutes: int,
) -> TimeWindow:
    """Build the slot for a booking request.

    Raises:
        InvalidWindowError: If the inputs are malformed or the end time falls
            on a later calendar date. An end of exactly midnight counts as the
            next day, since the end time must be a time on ``booking_date``.
    """
    start = validate_request_window(start_time, duration_minutes)

    # Offsets from midnight; booking_date itself is never shifted
    start_offset = timedelta(
        hours=start.hour,
        minutes=start.minute,
        seconds=start.second,
        microseconds=start.microsecond,
    )
    minutes_left = (MINUTES_PER_DAY * 60 - start_offset.total_seconds()) / 60

    if duration_minutes >= minutes_left:
        raise InvalidWindowError(
            f"A {duration_minutes} minute booking starting at "
            f"{format_time_of_day(start)} runs past the end of {booking_date.isoformat()}"
        )

    end = (datetime.min + start_offset + timedelta(minutes=duration_minutes)).time()
    return TimeWindow(booking_date=booking_date, start=start, end=end)
