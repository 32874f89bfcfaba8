"""Utility functions."""

from mentor_booking.utils.time import format_time_of_day, parse_time_of_day, utc_now

__all__ = ["utc_now", "format_time_of_day", "parse_time_of_day"]
