"""Tests for mentor and student registration."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.booking.errors import StorageFailureError
from mentor_booking.services.directory import DirectoryStore


def failing_commit() -> AsyncMock:
    return AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("database is locked")))


class TestRegistration:
    """Tests for DirectoryStore registration."""

    @pytest.mark.asyncio
    async def test_create_mentor_normalises_expertise(self, async_session: AsyncSession) -> None:
        store = DirectoryStore(async_session)

        mentor = await store.create_mentor("Ada Lovelace", [" math", "computing", "math"])

        assert mentor.expertise == frozenset({"math", "computing"})
        assert mentor.premium is False
        assert await store.get_mentor(mentor.id) is mentor

    @pytest.mark.asyncio
    async def test_mentor_commit_failure_is_storage_failure(
        self,
        async_session: AsyncSession,
    ) -> None:
        store = DirectoryStore(async_session)

        with patch.object(async_session, "commit", failing_commit()):
            with pytest.raises(StorageFailureError) as exc_info:
                await store.create_mentor("Ada Lovelace", ["math"])

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert await store.list_mentors() == []

    @pytest.mark.asyncio
    async def test_student_commit_failure_is_storage_failure(
        self,
        async_session: AsyncSession,
    ) -> None:
        store = DirectoryStore(async_session)

        with patch.object(async_session, "commit", failing_commit()):
            with pytest.raises(StorageFailureError):
                await store.create_student("Sam Patel", "biology")

        assert await store.list_students() == []

    @pytest.mark.asyncio
    async def test_lock_timeout_rolls_back(self) -> None:
        session = AsyncMock()
        session.add = MagicMock()
        session.commit.side_effect = TimeoutError()

        with pytest.raises(StorageFailureError):
            await DirectoryStore(session).create_student("Sam Patel", "biology")

        session.rollback.assert_awaited_once()
