"""Ledger store: appointment and payment persistence.

Nothing here commits. The booking service owns the transaction and calls
these methods between taking the mentor/date lock and committing, so the
availability check and both inserts see one consistent view.
"""

import hashlib
import logging
from collections.abc import Sequence
from datetime import date, time

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.models.directory import Mentor
from mentor_booking.models.ledger import Appointment, Payment
from mentor_booking.services.directory import is_valid_id

logger = logging.getLogger(__name__)


def mentor_day_lock_key(mentor_id: str, booking_date: date) -> int:
    """Stable signed 64-bit key for the per-mentor-per-date advisory lock."""
    digest = hashlib.blake2b(
        f"{mentor_id}:{booking_date.isoformat()}".encode(),
        digest_size=8,
    ).digest()
    return int.from_bytes(digest, "big", signed=True)


class LedgerStore:
    """Appointment and payment tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    async def lock_mentor_day(self, mentor_id: str, booking_date: date) -> None:
        """Serialise bookings for one mentor on one date.

        The lock belongs to the current transaction and is released by its
        commit or rollback.

        - PostgreSQL: transaction-scoped advisory lock on (mentor, date).
        - SQLite: every transaction already starts with BEGIN IMMEDIATE and
          holds the database write lock.
        - Anything else: row lock on the mentor.
        """
        dialect = self.dialect_name

        if dialect == "postgresql":
            await self.session.execute(
                select(func.pg_advisory_xact_lock(mentor_day_lock_key(mentor_id, booking_date)))
            )
        elif dialect == "sqlite":
            # Make sure the IMMEDIATE transaction is open even if nothing ran yet
            await self.session.execute(select(Mentor.id).where(Mentor.id == mentor_id))
        else:
            await self.session.execute(
                select(Mentor.id).where(Mentor.id == mentor_id).with_for_update()
            )

        logger.debug(f"Booking lock held for mentor {mentor_id} on {booking_date}")

    async def find_overlapping(
        self,
        mentor_id: str,
        booking_date: date,
        start: time,
        end: time,
    ) -> bool:
        """Check whether any appointment for the mentor on the date overlaps ``[start, end)``.

        Uses the half-open overlap predicate ``existing.start < end AND start < existing.end``.
        """
        if not is_valid_id(mentor_id):
            return False

        result = await self.session.execute(
            select(Appointment.id)
            .where(
                Appointment.mentor_id == mentor_id,
                Appointment.booking_date == booking_date,
                Appointment.start_time < end,
                Appointment.end_time > start,
            )
            .limit(1)
        )
        conflict_id = result.scalar_one_or_none()

        if conflict_id is not None:
            logger.info(
                f"Slot {start}-{end} on {booking_date} for mentor {mentor_id} "
                f"overlaps appointment {conflict_id}"
            )
        return conflict_id is not None

    async def insert_appointment_and_payment(
        self,
        appointment: Appointment,
        payment: Payment,
    ) -> tuple[str, str]:
        """Write an appointment and the payment that references it.

        Both rows are flushed inside the caller's transaction. A failure on
        either insert propagates so the caller rolls back both.

        Returns:
            (appointment_id, payment_id)
        """
        await self._insert_appointment(appointment)
        payment.appointment_id = appointment.id
        await self._insert_payment(payment)
        return appointment.id, payment.id

    async def _insert_appointment(self, appointment: Appointment) -> None:
        self.session.add(appointment)
        await self.session.flush()

    async def _insert_payment(self, payment: Payment) -> None:
        self.session.add(payment)
        await self.session.flush()

    async def get_appointment(self, appointment_id: str) -> Appointment | None:
        """Get a single appointment by ID."""
        if not is_valid_id(appointment_id):
            return None
        result = await self.session.execute(
            select(Appointment).where(Appointment.id == appointment_id)
        )
        return result.scalar_one_or_none()

    async def list_appointments(
        self,
        mentor_id: str | None = None,
        booking_date: date | None = None,
    ) -> Sequence[Appointment]:
        """List appointments, optionally for one mentor and/or date."""
        query = select(Appointment)

        if mentor_id:
            if not is_valid_id(mentor_id):
                return []
            query = query.where(Appointment.mentor_id == mentor_id)

        if booking_date:
            query = query.where(Appointment.booking_date == booking_date)

        query = query.order_by(Appointment.booking_date, Appointment.start_time)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def list_payments(self, appointment_id: str | None = None) -> Sequence[Payment]:
        """List payments, optionally for one appointment."""
        query = select(Payment)

        if appointment_id:
            if not is_valid_id(appointment_id):
                return []
            query = query.where(Payment.appointment_id == appointment_id)

        query = query.order_by(Payment.created_at, Payment.id)

        result = await self.session.execute(query)
        return result.scalars().all()
