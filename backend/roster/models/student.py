"""
Roster Backend: Student SQLAlchemy Model
==========================================

What:  ORM model for the ``students`` table plus the age calculation.
Who:   Used by the student repository for CRUD and by Alembic for migrations.

Table Design:
    - id: integer drawn from ``student_sequence`` (start 1, step 1), assigned
      on insert and never changed
    - name / email: mutable free text; email is unique (uq_students_email)
    - date_of_birth: set at creation; no update path touches it
    - age: derived on every read from date_of_birth, never stored
"""

from datetime import date
from typing import Optional

from sqlalchemy import BigInteger, Date, Integer, Sequence, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base

student_sequence = Sequence("student_sequence", start=1, increment=1)


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """
    Whole years elapsed between ``date_of_birth`` and ``today``.

    A birthday not yet reached this year does not count, so a student born
    on 2000-01-05 is 24 on 2024-06-01 and 23 on 2024-01-04. ``today``
    defaults to the current local date.
    """
    today = today or date.today()
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


class Student(Base):
    """
    A registered student.

    Lifecycle:
        1. Constructed without an id
        2. Inserted by the repository; the sequence assigns ``id``
        3. ``name`` / ``email`` updated in place by the service
        4. Deleted by id (hard delete, no history kept)
    """

    __tablename__ = "students"

    # BigInteger on PostgreSQL; plain INTEGER on SQLite so the rowid autoincrements
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        student_sequence,
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_students_email"),
    )

    @property
    def age(self) -> int:
        """Age in whole years as of today. Computed on every access."""
        return calculate_age(self.date_of_birth)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name='{self.name}', email='{self.email}')>"
