"""Ledger models: appointments and the payments recorded for them.

An appointment and its payment are always written in the same transaction
by the booking service. Neither is ever updated.
"""

from datetime import date, time

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from mentor_booking.db.base import Base, TimestampMixin


class Appointment(Base, TimestampMixin):
    """A booked half-open slot ``[start_time, end_time)`` for one mentor.

    For a fixed mentor and date no two appointments overlap. That invariant
    is enforced by the booking transaction, not by a table constraint.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="positive_duration"),
        CheckConstraint("start_time < end_time", name="start_before_end"),
        Index("ix_appointments_mentor_id_date", "mentor_id", "date"),
    )

    mentor_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("mentors.id"),
        nullable=False,
    )
    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("students.id"),
        nullable=False,
        index=True,
    )
    booking_date: Mapped[date] = mapped_column(
        "date",
        Date,
        nullable=False,
    )
    start_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
    )
    end_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
    )
    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Appointment {self.id[:8]}... {self.booking_date} {self.start_time}-{self.end_time}>"


class Payment(Base, TimestampMixin):
    """Payment record for one appointment.

    ``appointment_id`` is a plain reference rather than a foreign key:
    payments are financial records and outlive administrative deletion of
    the appointment they paid for.
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="non_negative_amount"),
    )

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("students.id"),
        nullable=False,
        index=True,
    )
    mentor_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("mentors.id"),
        nullable=False,
        index=True,
    )
    appointment_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        nullable=False,
        index=True,
    )
    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    # Minor currency units
    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Payment {self.id[:8]}... appointment={self.appointment_id[:8]} amount={self.amount}>"
