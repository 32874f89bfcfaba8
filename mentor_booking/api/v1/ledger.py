"""Appointment and payment endpoints (read and administrative delete)."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from mentor_booking.api.deps import Administration, Ledger, http_error
from mentor_booking.booking.errors import BookingError
from mentor_booking.schemas.ledger import (
    AppointmentRead,
    DeletionSummaryResponse,
    PaymentRead,
)

appointments_router = APIRouter()
payments_router = APIRouter()


@appointments_router.get("", response_model=list[AppointmentRead])
async def list_appointments(
    ledger: Ledger,
    mentor_id: str | None = Query(None),
    booking_date: date | None = Query(None, alias="date"),
) -> list[AppointmentRead]:
    """List appointments, optionally filtered by mentor and date."""
    appointments = await ledger.list_appointments(
        mentor_id=mentor_id,
        booking_date=booking_date,
    )
    return [AppointmentRead.model_validate(a) for a in appointments]


@appointments_router.get("/{appointment_id}", response_model=AppointmentRead)
async def get_appointment(appointment_id: str, ledger: Ledger) -> AppointmentRead:
    """Get a single appointment."""
    appointment = await ledger.get_appointment(appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
    return AppointmentRead.model_validate(appointment)


@appointments_router.delete("/{appointment_id}", response_model=DeletionSummaryResponse)
async def delete_appointment(
    appointment_id: str,
    admin: Administration,
) -> DeletionSummaryResponse:
    """Delete one appointment. Its payment record is kept."""
    try:
        summary = await admin.delete_appointment(appointment_id)
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)


@appointments_router.delete("", response_model=DeletionSummaryResponse)
async def delete_all_appointments(admin: Administration) -> DeletionSummaryResponse:
    """Delete all appointments. Payment records are kept."""
    try:
        summary = await admin.delete_all_appointments()
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)


@payments_router.get("", response_model=list[PaymentRead])
async def list_payments(
    ledger: Ledger,
    appointment_id: str | None = Query(None),
) -> list[PaymentRead]:
    """List payment records."""
    payments = await ledger.list_payments(appointment_id=appointment_id)
    return [PaymentRead.model_validate(p) for p in payments]


@payments_router.delete("", response_model=DeletionSummaryResponse)
async def delete_all_payments(admin: Administration) -> DeletionSummaryResponse:
    """Delete all payment records."""
    try:
        summary = await admin.delete_all_payments()
    except BookingError as e:
        raise http_error(e)
    return DeletionSummaryResponse.model_validate(summary, from_attributes=True)
