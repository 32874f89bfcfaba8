"""Administrative deletes for directory and ledger rows.

Mentors and students referenced by appointments or payments are never
silently orphaned: deleting one is refused unless the caller explicitly asks
for a cascade, which removes the referencing ledger rows in the same
transaction. Deleting appointments never deletes their payments.
"""

import logging
from dataclasses import asdict, dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.booking.errors import NotFoundError, ReferencedEntityError
from mentor_booking.core.logging import audit_logger
from mentor_booking.db.session import unit_of_work
from mentor_booking.models.directory import Mentor, Student
from mentor_booking.models.ledger import Appointment, Payment
from mentor_booking.services.directory import is_valid_id

logger = logging.getLogger(__name__)


@dataclass
class DeletionSummary:
    """Number of rows removed by an administrative delete."""

    mentors: int = 0
    students: int = 0
    appointments: int = 0
    payments: int = 0


class AdministrationService:
    """Deletes directory and ledger rows on administrative request."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count(self, model: type, *criteria) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(model).where(*criteria)
        )
        return result.scalar_one()

    async def _delete(self, model: type, *criteria) -> int:
        result = await self.session.execute(delete(model).where(*criteria))
        return result.rowcount or 0

    async def _delete_party(
        self,
        model: type[Mentor] | type[Student],
        entity: str,
        entity_id: str,
        cascade: bool,
    ) -> DeletionSummary:
        summary = DeletionSummary()

        async with unit_of_work(self.session, "Administrative change"):
            if not is_valid_id(entity_id) or not await self._count(model, model.id == entity_id):
                raise NotFoundError(entity, entity_id)

            appointment_ref = getattr(Appointment, f"{entity}_id") == entity_id
            payment_ref = getattr(Payment, f"{entity}_id") == entity_id

            appointment_count = await self._count(Appointment, appointment_ref)
            payment_count = await self._count(Payment, payment_ref)

            if (appointment_count or payment_count) and not cascade:
                raise ReferencedEntityError(
                    f"{entity.capitalize()} {entity_id} is referenced by "
                    f"{appointment_count} appointment(s) and {payment_count} payment(s); "
                    "delete with cascade to remove them"
                )

            summary.payments = await self._delete(Payment, payment_ref)
            summary.appointments = await self._delete(Appointment, appointment_ref)
            setattr(summary, f"{entity}s", await self._delete(model, model.id == entity_id))

        audit_logger.log(
            action=f"{entity}.deleted",
            entity_type=entity,
            entity_id=entity_id,
            metadata={"cascade": cascade, **asdict(summary)},
        )
        return summary

    async def _delete_all_parties(
        self,
        model: type[Mentor] | type[Student],
        entity: str,
        cascade: bool,
    ) -> DeletionSummary:
        summary = DeletionSummary()

        async with unit_of_work(self.session, "Administrative change"):
            # Every ledger row references some mentor and some student
            appointment_count = await self._count(Appointment)
            payment_count = await self._count(Payment)

            if (appointment_count or payment_count) and not cascade:
                raise ReferencedEntityError(
                    f"{appointment_count} appointment(s) and {payment_count} payment(s) "
                    f"reference existing {entity}s; delete with cascade to remove them"
                )

            summary.payments = await self._delete(Payment)
            summary.appointments = await self._delete(Appointment)
            setattr(summary, f"{entity}s", await self._delete(model))

        audit_logger.log(
            action=f"{entity}.deleted_all",
            entity_type=entity,
            entity_id="*",
            metadata={"cascade": cascade, **asdict(summary)},
        )
        return summary

    async def delete_mentor(self, mentor_id: str, cascade: bool = False) -> DeletionSummary:
        """Delete one mentor.

        Raises:
            NotFoundError: If the mentor does not exist
            ReferencedEntityError: If ledger rows reference the mentor and
                ``cascade`` is false
        """
        return await self._delete_party(Mentor, "mentor", mentor_id, cascade)

    async def delete_student(self, student_id: str, cascade: bool = False) -> DeletionSummary:
        """Delete one student (same rules as ``delete_mentor``)."""
        return await self._delete_party(Student, "student", student_id, cascade)

    async def delete_all_mentors(self, cascade: bool = False) -> DeletionSummary:
        """Delete every mentor, refusing while ledger rows exist unless cascading."""
        return await self._delete_all_parties(Mentor, "mentor", cascade)

    async def delete_all_students(self, cascade: bool = False) -> DeletionSummary:
        """Delete every student, refusing while ledger rows exist unless cascading."""
        return await self._delete_all_parties(Student, "student", cascade)

    async def delete_appointment(self, appointment_id: str) -> DeletionSummary:
        """Delete one appointment. Its payment is kept."""
        summary = DeletionSummary()

        async with unit_of_work(self.session, "Administrative change"):
            if not is_valid_id(appointment_id) or not await self._count(
                Appointment, Appointment.id == appointment_id
            ):
                raise NotFoundError("appointment", appointment_id)
            summary.appointments = await self._delete(
                Appointment, Appointment.id == appointment_id
            )

        audit_logger.log(
            action="appointment.deleted",
            entity_type="appointment",
            entity_id=appointment_id,
        )
        return summary

    async def delete_all_appointments(self) -> DeletionSummary:
        """Delete every appointment. Payments are kept."""
        async with unit_of_work(self.session, "Administrative change"):
            summary = DeletionSummary(appointments=await self._delete(Appointment))

        audit_logger.log(
            action="appointment.deleted_all",
            entity_type="appointment",
            entity_id="*",
            metadata=asdict(summary),
        )
        return summary

    async def delete_all_payments(self) -> DeletionSummary:
        """Delete every payment record."""
        async with unit_of_work(self.session, "Administrative change"):
            summary = DeletionSummary(payments=await self._delete(Payment))

        audit_logger.log(
            action="payment.deleted_all",
            entity_type="payment",
            entity_id="*",
            metadata=asdict(summary),
        )
        return summary
