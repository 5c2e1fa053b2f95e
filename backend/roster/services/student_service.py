"""
Roster Backend: Student Service (Business Rules)
==================================================

What:  The only component with branching logic: email uniqueness and
       partial-field updates for Student records.
How:   Wraps a StudentRepository passed to the constructor. Rule violations
       are raised as typed exceptions; the service never catches, retries,
       or logs its own errors.
Who:   Built per request by the students router; also used by roster.seed.

Update semantics:
    ┌───────────┐   ┌──────────────┐   ┌───────────────┐   ┌──────────┐
    │ find by id│──▶│ stage name   │──▶│ stage email   │──▶│ save once│
    │ (404)     │   │ if changed   │   │ if free (400) │   │          │
    └───────────┘   └──────────────┘   └───────────────┘   └──────────┘

    Changes are applied to the record only after every check has passed,
    so an EmailTakenError discards a staged name change as well.

Uniqueness under concurrency:
    The lookup-then-write checks are not atomic. The repository reports a
    unique-constraint violation as EmailConflictError, which is narrowed to
    DuplicateEmailError (create) or EmailTakenError (update) here.
"""

import logging
from typing import List, Optional

from roster.exceptions import (
    DuplicateEmailError,
    EmailConflictError,
    EmailTakenError,
    NotFoundError,
)
from roster.models.student import Student
from roster.repositories.base import StudentRepository

logger = logging.getLogger(__name__)


def _is_change(value: Optional[str], current: str) -> bool:
    """True when ``value`` is present, non-empty, and differs from ``current``."""
    return value is not None and value != "" and value != current


class StudentService:
    """
    Business logic for student records.

    Responsibilities:
        - list_students(): every stored record, unfiltered
        - create_student(): insert unless the email is already used
        - remove_student(): delete an existing record by id
        - update_student(): partial name/email update with full rollback
    """

    def __init__(self, repository: StudentRepository):
        self.repository = repository

    async def list_students(self) -> List[Student]:
        """Return all students. No filtering, no pagination."""
        return await self.repository.find_all()

    async def create_student(self, candidate: Student) -> Student:
        """
        Register a new student.

        Args:
            candidate: Unsaved Student (``id`` is None; any id set is discarded).

        Returns:
            The saved Student with its database-assigned id.

        Raises:
            DuplicateEmailError: A student with ``candidate.email`` exists.
        """
        existing = await self.repository.find_by_email(candidate.email)
        if existing is not None:
            raise DuplicateEmailError(email=candidate.email)

        candidate.id = None
        try:
            saved = await self.repository.save(candidate)
        except EmailConflictError as e:
            raise DuplicateEmailError(email=candidate.email) from e

        logger.info("Student %s registered", saved.id)
        return saved

    async def remove_student(self, student_id: int) -> None:
        """
        Delete a student by id.

        Raises:
            NotFoundError: No student has ``student_id``.
        """
        if not await self.repository.exists_by_id(student_id):
            raise NotFoundError(resource="Student", resource_id=student_id)

        await self.repository.delete_by_id(student_id)
        logger.info("Student %s deleted", student_id)

    async def update_student(
        self,
        student_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Student:
        """
        Change a student's name and/or email.

        Each field is applied only when it is given, non-empty, and different
        from the stored value. Calling with neither field is a successful
        no-op. Setting the email a student already holds is also a no-op.

        Returns:
            The student after the update (unchanged for a no-op).

        Raises:
            NotFoundError:   No student has ``student_id``.
            EmailTakenError: Another student already holds ``email``. Nothing
                             is written, including a requested name change.
        """
        student = await self.repository.find_by_id(student_id)
        if student is None:
            raise NotFoundError(resource="Student", resource_id=student_id)

        new_name: Optional[str] = None
        new_email: Optional[str] = None

        if _is_change(name, student.name):
            new_name = name

        if _is_change(email, student.email):
            holder = await self.repository.find_by_email(email)
            if holder is not None and holder.id != student_id:
                raise EmailTakenError(email=email)
            new_email = email

        if new_name is None and new_email is None:
            return student

        if new_name is not None:
            student.name = new_name
        if new_email is not None:
            student.email = new_email

        try:
            saved = await self.repository.save(student)
        except EmailConflictError as e:
            raise EmailTakenError(email=student.email) from e

        logger.info("Student %s updated", student_id)
        return saved
