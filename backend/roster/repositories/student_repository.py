"""
Roster Backend: SQLAlchemy Student Repository
===============================================

What:  StudentRepository implementation over an async SQLAlchemy session.
How:   SQLAlchemy 2.0 ``select()`` queries; writes are flushed, not
       committed. The per-request session dependency commits or rolls back.
Who:   Built per request by ``roster.routes.students.get_student_repository``.

Error translation:
    IntegrityError naming uq_students_email → EmailConflictError
    Any other SQLAlchemyError (other constraints included) → DatabaseError

Ids outside the BIGINT range cannot exist in the table, so id lookups
answer "absent" for them without querying the driver.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.exceptions import DatabaseError, EmailConflictError
from roster.models.student import Student
from roster.repositories.base import StudentRepository

logger = logging.getLogger(__name__)

# Signed 64-bit range of the BIGINT primary key
MIN_STUDENT_ID = -(2 ** 63)
MAX_STUDENT_ID = 2 ** 63 - 1

# How PostgreSQL and SQLite name the email unique violation in their messages
EMAIL_CONSTRAINT_MARKERS = ("uq_students_email", "students.email")


def is_storable_id(student_id: int) -> bool:
    return MIN_STUDENT_ID <= student_id <= MAX_STUDENT_ID


def is_email_conflict(exc: IntegrityError) -> bool:
    """True when the integrity failure comes from the unique email constraint."""
    message = str(exc.orig)
    return any(marker in message for marker in EMAIL_CONSTRAINT_MARKERS)


class SqlAlchemyStudentRepository(StudentRepository):
    """Student store backed by the ``students`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> List[Student]:
        try:
            result = await self.session.execute(select(Student).order_by(Student.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("find_all", e)

    async def find_by_id(self, student_id: int) -> Optional[Student]:
        if not is_storable_id(student_id):
            return None
        try:
            result = await self.session.execute(
                select(Student).where(Student.id == student_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("find_by_id", e, student_id=student_id)

    async def find_by_email(self, email: str) -> Optional[Student]:
        try:
            result = await self.session.execute(
                select(Student).where(Student.email == email)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("find_by_email", e)

    async def exists_by_id(self, student_id: int) -> bool:
        if not is_storable_id(student_id):
            return False
        try:
            result = await self.session.execute(
                select(exists().where(Student.id == student_id))
            )
            return bool(result.scalar())
        except SQLAlchemyError as e:
            raise self._database_error("exists_by_id", e, student_id=student_id)

    async def save(self, student: Student) -> Student:
        """
        Persist ``student`` and return it with its id populated.

        New records are added to the session; flushing sends the INSERT so
        the sequence-assigned id is available before the request commits.
        Existing records are already tracked by the session, so flushing
        writes their dirty attributes.
        """
        self.session.add(student)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if not is_email_conflict(e):
                raise self._database_error("save", e, student_id=student.id)
            logger.info("Unique constraint rejected email %s: %s", student.email, e.orig)
            raise EmailConflictError(email=student.email) from e
        except SQLAlchemyError as e:
            raise self._database_error("save", e, student_id=student.id)
        return student

    async def delete_by_id(self, student_id: int) -> None:
        if not is_storable_id(student_id):
            return
        try:
            await self.session.execute(delete(Student).where(Student.id == student_id))
        except SQLAlchemyError as e:
            raise self._database_error("delete_by_id", e, student_id=student_id)

    @staticmethod
    def _database_error(operation: str, exc: Exception, **context) -> DatabaseError:
        logger.error("Database error in %s: %s", operation, str(exc), exc_info=True)
        return DatabaseError(
            context={"operation": operation, "error_type": type(exc).__name__, **context},
        )
