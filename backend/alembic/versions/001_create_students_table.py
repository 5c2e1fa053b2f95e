"""Create students table

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

What:  Creates ``student_sequence`` and the ``students`` table with a unique
       constraint on ``email``. On SQLite (no sequences) the integer primary
       key autoincrements instead.
Rollback: downgrade() drops the table and the sequence (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

student_sequence = sa.Sequence("student_sequence", start=1, increment=1)


def _supports_sequences() -> bool:
    return op.get_bind().dialect.supports_sequences


def upgrade() -> None:
    id_column_args = []
    id_column_kwargs = {}
    if _supports_sequences():
        op.execute(sa.schema.CreateSequence(student_sequence))
        id_column_args.append(student_sequence)
        id_column_kwargs["server_default"] = student_sequence.next_value()

    op.create_table(
        "students",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            *id_column_args,
            nullable=False,
            **id_column_kwargs,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_students_email"),
    )


def downgrade() -> None:
    op.drop_table("students")
    if _supports_sequences():
        op.execute(sa.schema.DropSequence(student_sequence))
