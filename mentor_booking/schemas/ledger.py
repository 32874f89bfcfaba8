"""Pydantic schemas for bookings, appointments and payments."""

from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_serializer

from mentor_booking.utils.time import format_time_of_day


class BookAppointmentRequest(BaseModel):
    """Request to book a mentor slot and record its payment.

    Times are wall-clock times in the service's single local zone.
    """

    student_id: str
    mentor_id: str
    booking_date: date = Field(..., alias="date", examples=["2024-05-01"])
    start_time: str = Field(..., description="HH:MM format", examples=["10:00"])
    duration_minutes: int = Field(..., examples=[30])
    amount: int = Field(..., description="Amount in minor currency units", examples=[5000])

    model_config = {"populate_by_name": True}


class BookingResponse(BaseModel):
    """A committed booking."""

    appointment_id: str
    payment_id: str
    mentor_id: str
    student_id: str
    booking_date: date = Field(..., alias="date")
    start_time: str
    end_time: str
    duration_minutes: int
    amount: int

    model_config = {"populate_by_name": True}


class AvailabilityResponse(BaseModel):
    """Result of an availability check for one slot."""

    mentor_id: str
    booking_date: date = Field(..., alias="date")
    start_time: str
    end_time: str
    available: bool

    model_config = {"populate_by_name": True}


class AppointmentRead(BaseModel):
    """Schema for reading an appointment."""

    id: str
    mentor_id: str
    student_id: str
    booking_date: date = Field(..., alias="date")
    start_time: time
    end_time: time
    duration_minutes: int
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: time) -> str:
        return format_time_of_day(value)


class PaymentRead(BaseModel):
    """Schema for reading a payment record."""

    id: str
    student_id: str
    mentor_id: str
    appointment_id: str
    duration_minutes: int
    amount: int
    created_at: datetime

    model_config = {"from_attributes": True}


class DeletionSummaryResponse(BaseModel):
    """Rows removed by an administrative delete."""

    mentors: int = 0
    students: int = 0
    appointments: int = 0
    payments: int = 0
