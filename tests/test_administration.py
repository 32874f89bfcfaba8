"""Tests for administrative deletes."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.booking.errors import (
    NotFoundError,
    ReferencedEntityError,
    StorageFailureError,
)
from mentor_booking.models.directory import Mentor, Student
from mentor_booking.services.administration import AdministrationService, DeletionSummary
from mentor_booking.services.booking import BookingResult, BookingService
from mentor_booking.services.directory import DirectoryStore
from mentor_booking.services.ledger import LedgerStore

DAY = date(2024, 5, 1)


@pytest.fixture
async def booking(
    async_session: AsyncSession,
    biology_mentor: Mentor,
    biology_student: Student,
) -> BookingResult:
    """A committed 10:00-10:30 booking."""
    return await BookingService(async_session).book_appointment(
        biology_student.id, biology_mentor.id, DAY, "10:00", 30, 5000
    )


class TestDeleteParties:
    """Deleting mentors and students."""

    @pytest.mark.asyncio
    async def test_delete_unreferenced_mentor(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
    ) -> None:
        summary = await AdministrationService(async_session).delete_mentor(biology_mentor.id)

        assert summary == DeletionSummary(mentors=1)
        assert await DirectoryStore(async_session).get_mentor(biology_mentor.id) is None

    @pytest.mark.asyncio
    async def test_referenced_mentor_is_refused(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
        booking: BookingResult,
    ) -> None:
        """Ledger rows must never be orphaned."""
        mentor_id = biology_mentor.id

        with pytest.raises(ReferencedEntityError):
            await AdministrationService(async_session).delete_mentor(mentor_id)

        assert await DirectoryStore(async_session).get_mentor(mentor_id) is not None
        assert len(await LedgerStore(async_session).list_appointments()) == 1

    @pytest.mark.asyncio
    async def test_cascade_removes_mentor_ledger_rows(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
        biology_student: Student,
        booking: BookingResult,
    ) -> None:
        summary = await AdministrationService(async_session).delete_mentor(
            biology_mentor.id, cascade=True
        )

        assert summary == DeletionSummary(mentors=1, appointments=1, payments=1)
        ledger = LedgerStore(async_session)
        assert await ledger.list_appointments() == []
        assert await ledger.list_payments() == []
        assert await DirectoryStore(async_session).get_student(biology_student.id) is not None

    @pytest.mark.asyncio
    async def test_cascade_removes_student_ledger_rows(
        self,
        async_session: AsyncSession,
        biology_student: Student,
        booking: BookingResult,
    ) -> None:
        student_id = biology_student.id
        admin = AdministrationService(async_session)

        with pytest.raises(ReferencedEntityError):
            await admin.delete_student(student_id)

        summary = await admin.delete_student(student_id, cascade=True)

        assert summary == DeletionSummary(students=1, appointments=1, payments=1)

    @pytest.mark.asyncio
    async def test_delete_missing_party(self, async_session: AsyncSession) -> None:
        admin = AdministrationService(async_session)

        with pytest.raises(NotFoundError) as exc_info:
            await admin.delete_mentor(str(uuid4()))
        assert exc_info.value.entity == "mentor"

        with pytest.raises(NotFoundError):
            await admin.delete_student("not-a-uuid")

    @pytest.mark.asyncio
    async def test_delete_all_mentors_refused_while_ledger_has_rows(
        self,
        async_session: AsyncSession,
        booking: BookingResult,
    ) -> None:
        admin = AdministrationService(async_session)

        with pytest.raises(ReferencedEntityError):
            await admin.delete_all_mentors()

        summary = await admin.delete_all_mentors(cascade=True)

        assert summary == DeletionSummary(mentors=1, appointments=1, payments=1)
        assert await DirectoryStore(async_session).list_mentors() == []

    @pytest.mark.asyncio
    async def test_delete_all_students_without_ledger_rows(
        self,
        async_session: AsyncSession,
        biology_student: Student,
        art_student: Student,
    ) -> None:
        summary = await AdministrationService(async_session).delete_all_students()

        assert summary.students == 2
        assert await DirectoryStore(async_session).list_students() == []


class TestDeleteLedgerRows:
    """Deleting appointments and payments."""

    @pytest.mark.asyncio
    async def test_delete_appointment_keeps_payment(
        self,
        async_session: AsyncSession,
        booking: BookingResult,
    ) -> None:
        summary = await AdministrationService(async_session).delete_appointment(
            booking.appointment_id
        )

        assert summary == DeletionSummary(appointments=1)
        ledger = LedgerStore(async_session)
        assert await ledger.get_appointment(booking.appointment_id) is None
        payments = await ledger.list_payments(booking.appointment_id)
        assert [p.id for p in payments] == [booking.payment_id]

    @pytest.mark.asyncio
    async def test_deleted_appointment_frees_slot(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
        biology_student: Student,
        booking: BookingResult,
    ) -> None:
        await AdministrationService(async_session).delete_appointment(booking.appointment_id)

        result = await BookingService(async_session).book_appointment(
            biology_student.id, biology_mentor.id, DAY, "10:15", 30, 5000
        )

        assert result.appointment_id != booking.appointment_id

    @pytest.mark.asyncio
    async def test_delete_missing_appointment(self, async_session: AsyncSession) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await AdministrationService(async_session).delete_appointment(str(uuid4()))

        assert exc_info.value.entity == "appointment"

    @pytest.mark.asyncio
    async def test_delete_all_appointments_then_payments(
        self,
        async_session: AsyncSession,
        booking: BookingResult,
    ) -> None:
        admin = AdministrationService(async_session)

        assert await admin.delete_all_appointments() == DeletionSummary(appointments=1)
        assert len(await LedgerStore(async_session).list_payments()) == 1

        assert await admin.delete_all_payments() == DeletionSummary(payments=1)
        assert await LedgerStore(async_session).list_payments() == []


class TestStorageFailures:
    """Database errors during administrative deletes."""

    @pytest.mark.asyncio
    async def test_lock_timeout_is_storage_failure(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = TimeoutError()

        with pytest.raises(StorageFailureError) as exc_info:
            await AdministrationService(session).delete_all_payments()

        assert isinstance(exc_info.value.__cause__, TimeoutError)
        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_refused_delete_rolls_back(self) -> None:
        session = AsyncMock()
        counts = MagicMock()
        counts.scalar_one.return_value = 1
        session.execute.return_value = counts

        with pytest.raises(ReferencedEntityError):
            await AdministrationService(session).delete_mentor(str(uuid4()))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()
