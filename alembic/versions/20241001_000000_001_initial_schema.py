"""Initial schema: directory and ledger tables.

Revision ID: 001
Revises:
Create Date: 2024-10-01 00:00:00.000000

Adds:
- mentors (expertise stored as a JSON array of tags)
- students
- appointments (per mentor/date index for conflict checks)
- payments (appointment_id kept as a plain reference)
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create directory and ledger tables."""

    # ========================================================================
    # DIRECTORY
    # ========================================================================

    op.create_table(
        "mentors",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("expertise", sa.Text(), nullable=False),
        sa.Column("premium", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_mentors"),
    )

    op.create_table(
        "students",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("area_of_interest", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_students"),
    )

    # ========================================================================
    # LEDGER
    # ========================================================================

    op.create_table(
        "appointments",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("mentor_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_appointments"),
        sa.ForeignKeyConstraint(
            ["mentor_id"],
            ["mentors.id"],
            name="fk_appointments_mentor_id_mentors",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_appointments_student_id_students",
        ),
        sa.CheckConstraint(
            "duration_minutes > 0",
            name="ck_appointments_positive_duration",
        ),
        sa.CheckConstraint(
            "start_time < end_time",
            name="ck_appointments_start_before_end",
        ),
    )
    op.create_index(
        "ix_appointments_mentor_id_date", "appointments", ["mentor_id", "date"]
    )
    op.create_index(
        "ix_appointments_student_id", "appointments", ["student_id"]
    )

    op.create_table(
        "payments",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("mentor_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("appointment_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_payments_student_id_students",
        ),
        sa.ForeignKeyConstraint(
            ["mentor_id"],
            ["mentors.id"],
            name="fk_payments_mentor_id_mentors",
        ),
        sa.CheckConstraint("amount >= 0", name="ck_payments_non_negative_amount"),
    )
    op.create_index("ix_payments_student_id", "payments", ["student_id"])
    op.create_index("ix_payments_mentor_id", "payments", ["mentor_id"])
    op.create_index("ix_payments_appointment_id", "payments", ["appointment_id"])


def downgrade() -> None:
    """Drop directory and ledger tables."""
    op.drop_index("ix_payments_appointment_id", table_name="payments")
    op.drop_index("ix_payments_mentor_id", table_name="payments")
    op.drop_index("ix_payments_student_id", table_name="payments")
    op.drop_table("payments")

    op.drop_index("ix_appointments_student_id", table_name="appointments")
    op.drop_index("ix_appointments_mentor_id_date", table_name="appointments")
    op.drop_table("appointments")

    op.drop_table("students")
    op.drop_table("mentors")
