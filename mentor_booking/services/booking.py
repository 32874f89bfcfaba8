"""Booking service: books a mentor slot and records its payment atomically.

The whole attempt runs in one database transaction. The mentor/date lock is
taken before the availability check and held until commit, so two
concurrent requests for overlapping slots cannot both pass the check. The
appointment and payment inserts share that transaction: any failure rolls
back both rows and the caller sees a typed error.
"""

import logging
from dataclasses import dataclass
from datetime import date, time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.booking.eligibility import is_eligible
from mentor_booking.booking.errors import (
    BookingError,
    IneligibleError,
    InvalidBookingError,
    NotFoundError,
    SlotUnavailableError,
    StorageFailureError,
)
from mentor_booking.booking.intervals import (
    TimeWindow,
    compute_window,
    validate_request_window,
)
from mentor_booking.booking.state import BookingState, can_transition
from mentor_booking.core.logging import audit_logger
from mentor_booking.models.ledger import Appointment, Payment
from mentor_booking.services.directory import DirectoryStore
from mentor_booking.services.ledger import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class BookingResult:
    """A committed booking: the appointment and the payment linked to it."""

    appointment: Appointment
    payment: Payment

    @property
    def appointment_id(self) -> str:
        return self.appointment.id

    @property
    def payment_id(self) -> str:
        return self.payment.id

    @property
    def end_time(self) -> time:
        return self.appointment.end_time


class BookingAttempt:
    """Tracks the state of one call to ``book_appointment``.

    Lives only for the duration of the call.
    """

    def __init__(self, student_id: str, mentor_id: str):
        self.student_id = student_id
        self.mentor_id = mentor_id
        self.state = BookingState.VALIDATING

    def advance(self, target: BookingState) -> None:
        if not can_transition(self.state, target):
            raise RuntimeError(f"Illegal booking transition {self.state.value} -> {target.value}")

        logger.debug(
            f"Booking {self.student_id}->{self.mentor_id}: "
            f"{self.state.value} -> {target.value}",
            extra={
                "booking_state": target.value,
                "mentor_id": self.mentor_id,
                "student_id": self.student_id,
            },
        )
        self.state = target


class BookingService:
    """Books appointments.

    Holds no state between calls; every call works against the current
    contents of the store through the injected directory and ledger.
    """

    def __init__(
        self,
        session: AsyncSession,
        directory: DirectoryStore | None = None,
        ledger: LedgerStore | None = None,
    ):
        self.session = session
        self.directory = directory or DirectoryStore(session)
        self.ledger = ledger or LedgerStore(session)

    async def is_available(
        self,
        mentor_id: str,
        booking_date: date,
        start: time,
        end: time,
    ) -> bool:
        """Check whether ``[start, end)`` on ``booking_date`` is free for the mentor.

        Read-only. The answer is advisory; only ``book_appointment`` holds the
        lock that makes it binding.
        """
        try:
            return not await self.ledger.find_overlapping(mentor_id, booking_date, start, end)
        except (SQLAlchemyError, TimeoutError) as e:
            logger.exception(f"Availability lookup failed for mentor {mentor_id}")
            raise StorageFailureError("Availability could not be checked") from e

    async def book_appointment(
        self,
        student_id: str,
        mentor_id: str,
        booking_date: date,
        start_time: time | str,
        duration_minutes: int,
        amount: int,
    ) -> BookingResult:
        """Book a slot and record its payment.

        Checks run in a fixed order and the first failure ends the attempt:
        window inputs, student, mentor, eligibility, same-day end time,
        availability. Then the appointment and payment are written.

        Args:
            student_id: Student making the booking
            mentor_id: Mentor being booked
            booking_date: Calendar date of the slot
            start_time: Start as ``time`` or ``HH:MM``
            duration_minutes: Length of the slot, must be positive
            amount: Payment amount in minor currency units

        Returns:
            The committed appointment and payment

        Raises:
            InvalidWindowError: Bad duration/start time, or the slot ends on a later date
            InvalidBookingError: Negative or non-integer amount
            NotFoundError: Student or mentor does not exist
            IneligibleError: Mentor's expertise does not cover the student's interest
            SlotUnavailableError: Slot overlaps an existing appointment
            DataIntegrityError: Stored mentor expertise is corrupt
            StorageFailureError: The transaction failed or timed out
        """
        attempt = BookingAttempt(student_id, mentor_id)

        try:
            result = await self._run(
                attempt,
                student_id=student_id,
                mentor_id=mentor_id,
                booking_date=booking_date,
                start_time=start_time,
                duration_minutes=duration_minutes,
                amount=amount,
            )
            await self.session.commit()
        except BookingError as e:
            if e.failed_in is None:
                e.failed_in = attempt.state
            await self._rollback(attempt)
            if e.is_operator_fault:
                logger.error(f"Booking failed in {e.failed_in.value}: {e.message}")
            else:
                logger.info(f"Booking rejected in {e.failed_in.value}: {e.code}")
            raise
        except (SQLAlchemyError, TimeoutError) as e:
            failed_in = attempt.state
            await self._rollback(attempt)
            logger.exception(f"Booking storage failure in {failed_in.value}")
            raise StorageFailureError(
                "The booking could not be saved; nothing was recorded",
                failed_in=failed_in,
            ) from e
        except Exception:
            await self._rollback(attempt)
            raise

        attempt.advance(BookingState.COMMITTED)

        audit_logger.log(
            action="appointment.booked",
            entity_type="appointment",
            entity_id=result.appointment_id,
            metadata={
                "payment_id": result.payment_id,
                "mentor_id": mentor_id,
                "student_id": student_id,
                "slot": str(
                    TimeWindow(
                        booking_date,
                        result.appointment.start_time,
                        result.appointment.end_time,
                    )
                ),
                "amount": amount,
            },
        )
        return result

    async def _run(
        self,
        attempt: BookingAttempt,
        student_id: str,
        mentor_id: str,
        booking_date: date,
        start_time: time | str,
        duration_minutes: int,
        amount: int,
    ) -> BookingResult:
        # Validating
        validate_request_window(start_time, duration_minutes)

        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise InvalidBookingError(f"Amount must be a non-negative integer, got {amount!r}")

        student = await self.directory.get_student(student_id)
        if not student:
            raise NotFoundError("student", student_id)

        mentor = await self.directory.get_mentor(mentor_id)
        if not mentor:
            raise NotFoundError("mentor", mentor_id)

        attempt.advance(BookingState.CHECKING_ELIGIBILITY)

        if not is_eligible(mentor.expertise, student.area_of_interest):
            raise IneligibleError(
                f"Mentor {mentor_id} has no expertise in '{student.area_of_interest}'"
            )

        if mentor.premium:
            logger.info(f"Mentor {mentor_id} is a premium mentor")

        attempt.advance(BookingState.CHECKING_AVAILABILITY)

        window = compute_window(booking_date, start_time, duration_minutes)

        await self.ledger.lock_mentor_day(mentor_id, booking_date)

        if await self.ledger.find_overlapping(mentor_id, booking_date, window.start, window.end):
            raise SlotUnavailableError(f"Time slot {window} is not available")

        attempt.advance(BookingState.PERSISTING)

        appointment = Appointment(
            mentor_id=mentor_id,
            student_id=student_id,
            booking_date=booking_date,
            start_time=window.start,
            end_time=window.end,
            duration_minutes=window.duration_minutes,
        )
        payment = Payment(
            student_id=student_id,
            mentor_id=mentor_id,
            duration_minutes=window.duration_minutes,
            amount=amount,
        )
        await self.ledger.insert_appointment_and_payment(appointment, payment)

        return BookingResult(appointment=appointment, payment=payment)

    async def _rollback(self, attempt: BookingAttempt) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            # The original failure is re-raised by the caller
            logger.exception("Rollback after failed booking also failed")
        attempt.advance(BookingState.ROLLED_BACK)
