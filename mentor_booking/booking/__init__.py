"""Booking core: slot arithmetic, eligibility rules and failure taxonomy."""

from mentor_booking.booking.eligibility import is_eligible
from mentor_booking.booking.errors import (
    BookingError,
    DataIntegrityError,
    IneligibleError,
    InvalidBookingError,
    InvalidWindowError,
    NotFoundError,
    ReferencedEntityError,
    SlotUnavailableError,
    StorageFailureError,
)
from mentor_booking.booking.intervals import TimeWindow, compute_window, intervals_overlap
from mentor_booking.booking.state import BookingState

__all__ = [
    "is_eligible",
    "intervals_overlap",
    "compute_window",
    "TimeWindow",
    "BookingState",
    "BookingError",
    "NotFoundError",
    "IneligibleError",
    "InvalidWindowError",
    "InvalidBookingError",
    "SlotUnavailableError",
    "ReferencedEntityError",
    "DataIntegrityError",
    "StorageFailureError",
]
