"""
Roster Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the test suite.

Fixture Inventory (all function-scoped):
    ├── fake_repository:  in-memory StudentRepository (service rule tests)
    ├── student_service:  StudentService over fake_repository
    ├── mock_db_session:  AsyncMock session (error translation tests)
    ├── db_engine:        in-memory aiosqlite engine with the schema created
    ├── db_session:       AsyncSession bound to db_engine
    └── test_client:      httpx AsyncClient wired to the app, sessions from db_engine
"""

import os

# Must be set before roster.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_DEMO_DATA"] = "false"

from itertools import count
from typing import AsyncGenerator, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from roster.database import Base, get_db_session
from roster.exceptions import EmailConflictError
from roster.models.student import Student
from roster.repositories.base import StudentRepository
from roster.services.student_service import StudentService


def _copy(student: Student) -> Student:
    return Student(
        id=student.id,
        name=student.name,
        email=student.email,
        date_of_birth=student.date_of_birth,
    )


class FakeStudentRepository(StudentRepository):
    """
    In-memory StudentRepository.

    Stores copies, so a record fetched and mutated by the caller is not
    changed in the store until it is passed to ``save()``. Ids come from a
    counter starting at 1. Like the real table, ``save()`` rejects an email
    held by another record with EmailConflictError.
    """

    def __init__(self):
        self.rows: Dict[int, Student] = {}
        self.save_calls = 0
        self._ids = count(1)

    async def find_all(self) -> List[Student]:
        return [_copy(s) for s in self.rows.values()]

    async def find_by_id(self, student_id: int) -> Optional[Student]:
        row = self.rows.get(student_id)
        return _copy(row) if row else None

    async def find_by_email(self, email: str) -> Optional[Student]:
        for row in self.rows.values():
            if row.email == email:
                return _copy(row)
        return None

    async def exists_by_id(self, student_id: int) -> bool:
        return student_id in self.rows

    async def save(self, student: Student) -> Student:
        self.save_calls += 1
        for row in self.rows.values():
            if row.email == student.email and row.id != student.id:
                raise EmailConflictError(email=student.email)
        if student.id is None:
            student.id = next(self._ids)
        self.rows[student.id] = _copy(student)
        return student

    async def delete_by_id(self, student_id: int) -> None:
        self.rows.pop(student_id, None)


@pytest.fixture
def fake_repository() -> FakeStudentRepository:
    return FakeStudentRepository()


@pytest.fixture
def student_service(fake_repository) -> StudentService:
    return StudentService(fake_repository)


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    ``get_db_session`` is overridden to hand out sessions on the test
    engine with the same commit/rollback behavior as production.
    """
    from roster.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
