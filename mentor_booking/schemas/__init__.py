"""Pydantic schemas for request/response validation."""

from mentor_booking.schemas.directory import MentorCreate, MentorRead, StudentCreate, StudentRead
from mentor_booking.schemas.ledger import (
    AppointmentRead,
    AvailabilityResponse,
    BookAppointmentRequest,
    BookingResponse,
    DeletionSummaryResponse,
    PaymentRead,
)

__all__ = [
    "MentorCreate",
    "MentorRead",
    "StudentCreate",
    "StudentRead",
    "BookAppointmentRequest",
    "BookingResponse",
    "AvailabilityResponse",
    "AppointmentRead",
    "PaymentRead",
    "DeletionSummaryResponse",
]
