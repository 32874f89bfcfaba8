"""Tests that an appointment and its payment are written together or not at all."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.dialects import mysql, postgresql
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.booking.errors import SlotUnavailableError, StorageFailureError
from mentor_booking.booking.state import BookingState
from mentor_booking.models.directory import Mentor, Student
from mentor_booking.models.ledger import Appointment, Payment
from mentor_booking.services.booking import BookingService
from mentor_booking.services.ledger import LedgerStore, mentor_day_lock_key

DAY = date(2024, 5, 1)


class FailingPaymentLedger(LedgerStore):
    """Ledger whose payment insert fails after the appointment was written."""

    async def _insert_payment(self, payment: Payment) -> None:
        raise OperationalError("INSERT INTO payments", {}, Exception("disk I/O error"))


async def ledger_counts(session: AsyncSession) -> tuple[int, int]:
    appointments = await session.execute(select(func.count()).select_from(Appointment))
    payments = await session.execute(select(func.count()).select_from(Payment))
    return appointments.scalar_one(), payments.scalar_one()


def session_for(dialect_name: str) -> AsyncMock:
    session = AsyncMock()
    session.get_bind = MagicMock()
    session.get_bind.return_value.dialect.name = dialect_name
    return session


def eligible_directory() -> AsyncMock:
    directory = AsyncMock()
    directory.get_student.return_value = MagicMock(area_of_interest="biology")
    directory.get_mentor.return_value = MagicMock(
        expertise=frozenset({"biology"}),
        premium=False,
    )
    return directory


class TestAtomicPersistence:
    """Failure injection during the persisting step."""

    @pytest.mark.asyncio
    async def test_payment_failure_rolls_back_appointment(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
        biology_student: Student,
    ) -> None:
        """The flushed appointment must not survive a failed payment insert."""
        service = BookingService(async_session, ledger=FailingPaymentLedger(async_session))

        with pytest.raises(StorageFailureError) as exc_info:
            await service.book_appointment(
                biology_student.id, biology_mentor.id, DAY, "10:00", 30, 5000
            )

        assert exc_info.value.failed_in == BookingState.PERSISTING
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert await ledger_counts(async_session) == (0, 0)

    @pytest.mark.asyncio
    async def test_slot_is_free_after_failed_booking(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
        biology_student: Student,
    ) -> None:
        """A rolled-back attempt leaves no trace that blocks a retry."""
        student_id, mentor_id = biology_student.id, biology_mentor.id
        failing = BookingService(async_session, ledger=FailingPaymentLedger(async_session))
        with pytest.raises(StorageFailureError):
            await failing.book_appointment(
                student_id, mentor_id, DAY, "10:00", 30, 5000
            )

        result = await BookingService(async_session).book_appointment(
            student_id, mentor_id, DAY, "10:00", 30, 5000
        )

        assert result.payment.appointment_id == result.appointment_id
        assert await ledger_counts(async_session) == (1, 1)

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back_both_rows(
        self,
        async_session: AsyncSession,
        biology_mentor: Mentor,
        biology_student: Student,
    ) -> None:
        service = BookingService(async_session)
        failing_commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("database is locked"))
        )

        with patch.object(async_session, "commit", failing_commit):
            with pytest.raises(StorageFailureError) as exc_info:
                await service.book_appointment(
                    biology_student.id, biology_mentor.id, DAY, "10:00", 30, 5000
                )

        assert exc_info.value.failed_in == BookingState.PERSISTING
        assert await ledger_counts(async_session) == (0, 0)

    @pytest.mark.asyncio
    async def test_lock_timeout_is_storage_failure(self) -> None:
        """A lock wait that times out is reported as a storage failure."""
        session = AsyncMock()
        directory = eligible_directory()
        ledger = AsyncMock()
        ledger.lock_mentor_day.side_effect = TimeoutError()

        service = BookingService(session, directory=directory, ledger=ledger)

        with pytest.raises(StorageFailureError) as exc_info:
            await service.book_appointment(
                str(uuid4()), str(uuid4()), DAY, "10:00", 30, 5000
            )

        assert exc_info.value.failed_in == BookingState.CHECKING_AVAILABILITY
        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()
        ledger.insert_appointment_and_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure_is_not_reported_as_conflict(self) -> None:
        """A failing availability query must not look like a taken slot."""
        session = AsyncMock()
        directory = eligible_directory()
        ledger = AsyncMock()
        ledger.find_overlapping.side_effect = OperationalError(
            "SELECT", {}, Exception("connection reset")
        )

        service = BookingService(session, directory=directory, ledger=ledger)

        with pytest.raises(StorageFailureError) as exc_info:
            await service.book_appointment(
                str(uuid4()), str(uuid4()), DAY, "10:00", 30, 5000
            )

        assert not isinstance(exc_info.value, SlotUnavailableError)
        assert exc_info.value.is_operator_fault

    @pytest.mark.asyncio
    async def test_unexpected_error_still_rolls_back(self) -> None:
        session = AsyncMock()
        ledger = AsyncMock()
        ledger.lock_mentor_day.side_effect = RuntimeError("driver bug")
        service = BookingService(session, directory=eligible_directory(), ledger=ledger)

        with pytest.raises(RuntimeError):
            await service.book_appointment(
                str(uuid4()), str(uuid4()), DAY, "10:00", 30, 5000
            )

        session.rollback.assert_awaited_once()
        session.commit.assert_not_called()


class TestMentorDayLockKey:
    """Tests for the advisory lock key."""

    def test_key_is_stable_and_signed_64_bit(self) -> None:
        mentor_id = str(uuid4())

        key = mentor_day_lock_key(mentor_id, DAY)

        assert key == mentor_day_lock_key(mentor_id, DAY)
        assert -(2**63) <= key < 2**63

    def test_key_differs_per_date(self) -> None:
        mentor_id = str(uuid4())
        assert mentor_day_lock_key(mentor_id, DAY) != mentor_day_lock_key(
            mentor_id, date(2024, 5, 2)
        )


class TestMentorDayLock:
    """Tests for the per-mentor-per-date booking lock."""

    @pytest.mark.asyncio
    async def test_postgresql_takes_advisory_transaction_lock(self) -> None:
        mentor_id = str(uuid4())
        session = session_for("postgresql")

        await LedgerStore(session).lock_mentor_day(mentor_id, DAY)

        statement = session.execute.await_args.args[0]
        compiled = statement.compile(dialect=postgresql.dialect())
        assert "pg_advisory_xact_lock" in str(compiled)
        assert list(compiled.params.values()) == [mentor_day_lock_key(mentor_id, DAY)]

    @pytest.mark.asyncio
    async def test_other_dialects_lock_mentor_row(self) -> None:
        session = session_for("mysql")

        await LedgerStore(session).lock_mentor_day(str(uuid4()), DAY)

        statement = session.execute.await_args.args[0]
        sql = str(statement.compile(dialect=mysql.dialect()))
        assert "FOR UPDATE" in sql
        assert "mentors" in sql

    @pytest.mark.asyncio
    async def test_sqlite_reads_without_row_lock(self) -> None:
        """BEGIN IMMEDIATE already holds the write lock."""
        session = session_for("sqlite")

        await LedgerStore(session).lock_mentor_day(str(uuid4()), DAY)

        statement = session.execute.await_args.args[0]
        assert "FOR UPDATE" not in str(statement.compile(dialect=postgresql.dialect()))

    @pytest.mark.asyncio
    async def test_lock_is_taken_before_availability_check(self) -> None:
        mentor_id = str(uuid4())
        ledger = AsyncMock()
        ledger.find_overlapping.return_value = False
        service = BookingService(AsyncMock(), directory=eligible_directory(), ledger=ledger)

        await service.book_appointment(str(uuid4()), mentor_id, DAY, "10:00", 30, 5000)

        assert [name for name, _, _ in ledger.mock_calls] == [
            "lock_mentor_day",
            "find_overlapping",
            "insert_appointment_and_payment",
        ]
        ledger.lock_mentor_day.assert_awaited_once_with(mentor_id, DAY)
