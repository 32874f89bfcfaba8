"""Database models for the mentor booking service."""

from mentor_booking.models.directory import Mentor, Student
from mentor_booking.models.ledger import Appointment, Payment

__all__ = [
    # Directory
    "Mentor",
    "Student",
    # Ledger
    "Appointment",
    "Payment",
]
