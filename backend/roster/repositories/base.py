"""
Roster Backend: Abstract Student Repository
=============================================

What:  The record-store interface consumed by StudentService.
How:   Abstract base class; concrete adapters implement every method.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from roster.models.student import Student


class StudentRepository(ABC):
    """
    Abstract store of Student records.

    Contract:
        - Lookups return ``None`` rather than raising when nothing matches
        - ``save()`` inserts when ``student.id`` is None (assigning an id) and
          otherwise persists the in-place changes of an existing record
        - A write rejected for a duplicate email raises EmailConflictError
        - Infrastructure failures raise DatabaseError
        - No ordering guarantee on ``find_all()``
    """

    @abstractmethod
    async def find_all(self) -> List[Student]:
        """Return every stored student."""
        ...

    @abstractmethod
    async def find_by_id(self, student_id: int) -> Optional[Student]:
        """Return the student with ``student_id``, or None."""
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Student]:
        """Return the student holding ``email`` (exact match), or None."""
        ...

    @abstractmethod
    async def exists_by_id(self, student_id: int) -> bool:
        ...

    @abstractmethod
    async def save(self, student: Student) -> Student:
        """
        Insert or update ``student`` and return the persisted record.

        Raises:
            EmailConflictError: Another record already holds ``student.email``.
            DatabaseError: The store failed for any other reason.
        """
        ...

    @abstractmethod
    async def delete_by_id(self, student_id: int) -> None:
        ...
