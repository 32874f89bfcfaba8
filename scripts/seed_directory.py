"""Register sample mentors and students for local development."""

import asyncio

from sqlalchemy import select

from mentor_booking.db.init_db import create_tables
from mentor_booking.db.session import AsyncSessionLocal
from mentor_booking.models.directory import Mentor
from mentor_booking.services.directory import DirectoryStore

MENTORS = [
    ("Rosalind Franklin", ["biology", "chemistry"], True),
    ("Emmy Noether", ["math", "physics"], False),
    ("Ada Lovelace", ["math", "computing"], False),
]

STUDENTS = [
    ("Sam Patel", "biology"),
    ("Jo Okafor", "math"),
    ("Alex Kim", "art"),
]


async def seed_directory() -> None:
    """Create tables if needed and register sample mentors and students."""
    await create_tables()

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Mentor.id).limit(1))
        if result.scalar_one_or_none():
            print("Directory already has mentors, skipping...")
            return

        directory = DirectoryStore(session)

        for name, expertise, premium in MENTORS:
            mentor = await directory.create_mentor(name, expertise, premium=premium)
            print(f"Mentor {mentor.name}: {mentor.id}")

        for name, interest in STUDENTS:
            student = await directory.create_student(name, interest)
            print(f"Student {student.name}: {student.id}")

        print("Directory seed complete!")


if __name__ == "__main__":
    asyncio.run(seed_directory())
