# Repositories package init
"""
Roster Backend: Record Store Layer
====================================

What:  Persistence adapters the service layer depends on.

Inventory:
    - StudentRepository (abstract): lookup, insert, delete and existence checks
    - SqlAlchemyStudentRepository: implementation over an AsyncSession

The service only sees the abstract interface, so it can be exercised
against an in-memory fake in tests.
"""

from roster.repositories.base import StudentRepository
from roster.repositories.student_repository import SqlAlchemyStudentRepository

__all__ = ["StudentRepository", "SqlAlchemyStudentRepository"]
