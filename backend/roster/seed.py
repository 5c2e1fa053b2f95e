"""
Roster Backend: Demo Data
===========================

What:  Inserts two sample students at startup when ``SEED_DEMO_DATA`` is set.
How:   Goes through StudentService, so the email uniqueness rule applies;
       students whose email already exists are skipped. Safe to run on
       every startup.
"""

import logging
from datetime import date
from typing import List

from roster.database import async_session_factory
from roster.exceptions import DuplicateEmailError
from roster.models.student import Student
from roster.repositories.student_repository import SqlAlchemyStudentRepository
from roster.services.student_service import StudentService

logger = logging.getLogger(__name__)


def demo_students() -> List[Student]:
    return [
        Student(name="Maki", email="maki@example.com", date_of_birth=date(2000, 1, 5)),
        Student(name="Pita", email="pita@example.com", date_of_birth=date(2000, 3, 5)),
    ]


async def seed_students(service: StudentService) -> int:
    """Register each demo student not already present. Returns how many were added."""
    added = 0
    for student in demo_students():
        try:
            await service.create_student(student)
        except DuplicateEmailError:
            logger.debug("Demo student %s already present", student.email)
            continue
        added += 1
    return added


async def seed_demo_data() -> None:
    """Open a session, seed, and commit."""
    async with async_session_factory() as session:
        service = StudentService(SqlAlchemyStudentRepository(session))
        added = await seed_students(service)
        await session.commit()
    logger.info("Seeded %d demo student(s)", added)
