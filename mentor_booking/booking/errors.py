"""Typed failures raised by the booking core.

Caller errors (not found, ineligible, bad window, slot taken, referenced
entity) describe a problem with the request. Operator faults (data
integrity, storage failure) describe a problem with the system and must
never be reported to the caller as a scheduling outcome.
"""

from mentor_booking.booking.state import BookingState


class BookingError(Exception):
    """Base class for booking failures."""

    code = "booking_error"
    is_operator_fault = False

    def __init__(self, message: str, failed_in: BookingState | None = None):
        super().__init__(message)
        self.message = message
        self.failed_in = failed_in

    def to_detail(self) -> dict[str, str]:
        """Error body for API responses."""
        return {"code": self.code, "message": self.message}


class NotFoundError(BookingError):
    """Raised when a referenced mentor, student or appointment does not exist."""

    code = "not_found"

    def __init__(
        self,
        entity: str,
        entity_id: str,
        failed_in: BookingState | None = None,
    ):
        super().__init__(f"{entity.capitalize()} {entity_id} not found", failed_in)
        self.entity = entity
        self.entity_id = entity_id

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "entity": self.entity}


class IneligibleError(BookingError):
    """Raised when the mentor's expertise does not cover the student's interest."""

    code = "ineligible"


class InvalidWindowError(BookingError):
    """Raised when the requested time window is malformed or leaves the day."""

    code = "invalid_window"


class InvalidBookingError(BookingError):
    """Raised for malformed booking input other than the time window."""

    code = "invalid_booking"


class SlotUnavailableError(BookingError):
    """Raised when the window overlaps an existing appointment for the mentor."""

    code = "slot_unavailable"


class ReferencedEntityError(BookingError):
    """Raised when deleting a mentor or student that ledger rows still reference."""

    code = "referenced_entity"


class DataIntegrityError(BookingError):
    """Raised when stored data cannot be interpreted (e.g. corrupt expertise)."""

    code = "data_integrity"
    is_operator_fault = True


class StorageFailureError(BookingError):
    """Raised when the transactional store fails or times out."""

    code = "storage_failure"
    is_operator_fault = True
