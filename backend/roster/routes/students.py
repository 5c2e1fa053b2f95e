"""
Roster Backend: Students Route Handlers
=========================================

What:  HTTP surface for listing, registering, updating and deleting students.
How:   FastAPI dependencies assemble a StudentService per request:
       get_db_session → get_student_repository → get_student_service.
       Service exceptions are mapped to responses by the global handlers:
       DuplicateEmailError / EmailTakenError → 400, NotFoundError → 404.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.models.student import Student
from roster.repositories.base import StudentRepository
from roster.repositories.student_repository import SqlAlchemyStudentRepository
from roster.schemas.student import (
    ErrorResponse,
    MessageResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from roster.services.student_service import StudentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/students", tags=["Students"])


# ── Dependencies ──────────────────────────────────────────────────────────

def get_student_repository(
    db: AsyncSession = Depends(get_db_session),
) -> StudentRepository:
    """Record store bound to this request's session."""
    return SqlAlchemyStudentRepository(db)


def get_student_service(
    repository: StudentRepository = Depends(get_student_repository),
) -> StudentService:
    return StudentService(repository)


# ── Handlers ──────────────────────────────────────────────────────────────

@router.get(
    "",
    response_model=List[StudentResponse],
    summary="List all students",
    description="Returns every registered student. No pagination.",
)
async def list_students(
    service: StudentService = Depends(get_student_service),
) -> List[Student]:
    return await service.list_students()


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Student registered", "model": StudentResponse},
        400: {"description": "Email already exists", "model": ErrorResponse},
    },
    summary="Register a new student",
)
async def register_student(
    payload: StudentCreate,
    service: StudentService = Depends(get_student_service),
) -> Student:
    """
    Register a student and return it with its assigned id.

    The body's ``id`` (if any) is ignored; the database assigns one.
    """
    candidate = Student(
        name=payload.name,
        email=payload.email,
        date_of_birth=payload.date_of_birth,
    )
    return await service.create_student(candidate)


@router.delete(
    "/{student_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Student deleted", "model": MessageResponse},
        404: {"description": "Student not found", "model": ErrorResponse},
    },
    summary="Delete a student",
)
async def delete_student(
    student_id: int,
    service: StudentService = Depends(get_student_service),
) -> MessageResponse:
    await service.remove_student(student_id)
    return MessageResponse(message="Student deleted successfully")


@router.put(
    "/{student_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Student updated (or unchanged)", "model": MessageResponse},
        400: {"description": "Email already taken", "model": ErrorResponse},
        404: {"description": "Student not found", "model": ErrorResponse},
    },
    summary="Update a student's name and/or email",
    description=(
        "Partial update: only non-empty fields that differ from the stored values "
        "are written. If the new email belongs to another student nothing is changed."
    ),
)
async def update_student(
    payload: StudentUpdate,
    student_id: int,
    service: StudentService = Depends(get_student_service),
) -> MessageResponse:
    await service.update_student(student_id, name=payload.name, email=payload.email)
    return MessageResponse(message="Student updated successfully")
