"""Business logic services."""

from mentor_booking.services.administration import AdministrationService, DeletionSummary
from mentor_booking.services.booking import BookingResult, BookingService
from mentor_booking.services.directory import DirectoryStore
from mentor_booking.services.ledger import LedgerStore

__all__ = [
    "AdministrationService",
    "DeletionSummary",
    "BookingResult",
    "BookingService",
    "DirectoryStore",
    "LedgerStore",
]
