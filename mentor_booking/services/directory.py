"""Directory store for mentor and student registration and lookup."""

import logging
from collections.abc import Iterable, Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_booking.core.logging import audit_logger
from mentor_booking.db.session import unit_of_work
from mentor_booking.models.directory import Mentor, Student

logger = logging.getLogger(__name__)


def is_valid_id(value: str) -> bool:
    """Check that an identifier is a UUID string before it reaches the database."""
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


class DirectoryStore:
    """Keyed storage for mentors and students.

    Reads decode the mentor's expertise through the ``TagSet`` column type,
    so a corrupt row raises ``DataIntegrityError`` from ``get_mentor``.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_mentor(self, mentor_id: str) -> Mentor | None:
        """Get a mentor by ID."""
        if not is_valid_id(mentor_id):
            return None
        result = await self.session.execute(
            select(Mentor).where(Mentor.id == mentor_id)
        )
        return result.scalar_one_or_none()

    async def get_student(self, student_id: str) -> Student | None:
        """Get a student by ID."""
        if not is_valid_id(student_id):
            return None
        result = await self.session.execute(
            select(Student).where(Student.id == student_id)
        )
        return result.scalar_one_or_none()

    async def list_mentors(self) -> Sequence[Mentor]:
        """List all mentors in registration order."""
        result = await self.session.execute(
            select(Mentor).order_by(Mentor.created_at, Mentor.id)
        )
        return result.scalars().all()

    async def list_students(self) -> Sequence[Student]:
        """List all students in registration order."""
        result = await self.session.execute(
            select(Student).order_by(Student.created_at, Student.id)
        )
        return result.scalars().all()

    async def create_mentor(
        self,
        name: str,
        expertise: Iterable[str],
        premium: bool = False,
    ) -> Mentor:
        """Register a new mentor.

        Raises:
            ValueError: If the expertise tags are malformed
            StorageFailureError: If the mentor could not be saved
        """
        mentor = Mentor(
            id=str(uuid4()),
            name=name,
            expertise=expertise,
            premium=premium,
        )

        async with unit_of_work(self.session, f"Registration of mentor {name!r}"):
            self.session.add(mentor)

        audit_logger.log(
            action="mentor.registered",
            entity_type="mentor",
            entity_id=mentor.id,
            metadata={"expertise": sorted(mentor.expertise), "premium": mentor.premium},
        )
        return mentor

    async def create_student(self, name: str, area_of_interest: str) -> Student:
        """Register a new student.

        Raises:
            ValueError: If the area of interest is blank
            StorageFailureError: If the student could not be saved
        """
        student = Student(
            id=str(uuid4()),
            name=name,
            area_of_interest=area_of_interest,
        )

        async with unit_of_work(self.session, f"Registration of student {name!r}"):
            self.session.add(student)

        audit_logger.log(
            action="student.registered",
            entity_type="student",
            entity_id=student.id,
            metadata={"area_of_interest": student.area_of_interest},
        )
        return student
