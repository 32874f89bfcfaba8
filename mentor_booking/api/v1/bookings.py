"""Booking API endpoints."""

from datetime import date

from fastapi import APIRouter, Query, status

from mentor_booking.api.deps import Booking, http_error
from mentor_booking.booking.errors import BookingError
from mentor_booking.booking.intervals import compute_window
from mentor_booking.schemas.ledger import (
    AvailabilityResponse,
    BookAppointmentRequest,
    BookingResponse,
)
from mentor_booking.utils.time import format_time_of_day

router = APIRouter()


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
    description="Books a mentor slot and records the payment in one transaction",
)
async def book_appointment(
    request: BookAppointmentRequest,
    service: Booking,
) -> BookingResponse:
    """Book a slot for a student with a mentor."""
    try:
        result = await service.book_appointment(
            student_id=request.student_id,
            mentor_id=request.mentor_id,
            booking_date=request.booking_date,
            start_time=request.start_time,
            duration_minutes=request.duration_minutes,
            amount=request.amount,
        )
    except BookingError as e:
        raise http_error(e)

    appointment = result.appointment
    return BookingResponse(
        appointment_id=result.appointment_id,
        payment_id=result.payment_id,
        mentor_id=appointment.mentor_id,
        student_id=appointment.student_id,
        booking_date=appointment.booking_date,
        start_time=format_time_of_day(appointment.start_time),
        end_time=format_time_of_day(appointment.end_time),
        duration_minutes=appointment.duration_minutes,
        amount=result.payment.amount,
    )


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    summary="Check slot availability",
)
async def check_availability(
    service: Booking,
    mentor_id: str = Query(...),
    booking_date: date = Query(..., alias="date"),
    start_time: str = Query(..., description="HH:MM format"),
    duration_minutes: int = Query(...),
) -> AvailabilityResponse:
    """Check whether a slot is currently free for a mentor.

    Advisory only: a later booking request can still lose the slot.
    """
    try:
        window = compute_window(booking_date, start_time, duration_minutes)
        available = await service.is_available(
            mentor_id, booking_date, window.start, window.end
        )
    except BookingError as e:
        raise http_error(e)

    return AvailabilityResponse(
        mentor_id=mentor_id,
        booking_date=booking_date,
        start_time=format_time_of_day(window.start),
        end_time=format_time_of_day(window.end),
        available=available,
    )
