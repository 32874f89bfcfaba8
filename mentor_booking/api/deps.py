"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

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
from mentor_booking.db.session import get_db
from mentor_booking.services.administration import AdministrationService
from mentor_booking.services.booking import BookingService
from mentor_booking.services.directory import DirectoryStore
from mentor_booking.services.ledger import LedgerStore

DbSession = Annotated[AsyncSession, Depends(get_db)]

# HTTP status for each booking failure; subclasses are matched in order
ERROR_STATUS: tuple[tuple[type[BookingError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (IneligibleError, status.HTTP_400_BAD_REQUEST),
    (InvalidWindowError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidBookingError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (SlotUnavailableError, status.HTTP_409_CONFLICT),
    (ReferencedEntityError, status.HTTP_409_CONFLICT),
    (DataIntegrityError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StorageFailureError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: BookingError) -> HTTPException:
    """Translate a booking failure into an HTTP error with a typed body."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.to_detail())
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=exc.to_detail(),
    )


def get_directory(session: DbSession) -> DirectoryStore:
    return DirectoryStore(session)


def get_ledger(session: DbSession) -> LedgerStore:
    return LedgerStore(session)


def get_booking_service(session: DbSession) -> BookingService:
    return BookingService(session)


def get_administration(session: DbSession) -> AdministrationService:
    return AdministrationService(session)


Directory = Annotated[DirectoryStore, Depends(get_directory)]
Ledger = Annotated[LedgerStore, Depends(get_ledger)]
Booking = Annotated[BookingService, Depends(get_booking_service)]
Administration = Annotated[AdministrationService, Depends(get_administration)]
