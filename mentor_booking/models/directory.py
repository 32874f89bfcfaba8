"""Directory models: mentors and students.

Only the fields needed for booking eligibility are modelled. Rows are
created by registration and never updated afterwards.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from mentor_booking.db.base import Base, TimestampMixin
from mentor_booking.db.types import TagSet, normalize_tags


class Mentor(Base, TimestampMixin):
    """A mentor offering sessions in one or more interest areas."""

    __tablename__ = "mentors"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    # Interest-area tags the mentor can teach
    expertise: Mapped[frozenset[str]] = mapped_column(
        TagSet(),
        nullable=False,
    )
    # Recorded and logged only; no booking rule depends on it
    premium: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    @validates("expertise")
    def _validate_expertise(self, key: str, value: object) -> frozenset[str]:
        return normalize_tags(value)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"<Mentor {self.name} expertise={sorted(self.expertise or ())}>"


class Student(Base, TimestampMixin):
    """A student looking for a mentor in a single area of interest."""

    __tablename__ = "students"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    area_of_interest: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    @validates("area_of_interest")
    def _validate_area_of_interest(self, key: str, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Area of interest must not be empty")
        return stripped

    def __repr__(self) -> str:
        return f"<Student {self.name} interest={self.area_of_interest}>"
