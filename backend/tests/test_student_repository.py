"""
Roster Backend: SQLAlchemy Repository Tests
=============================================

What:  SqlAlchemyStudentRepository against a real (in-memory SQLite)
       database, plus error translation with a mocked session.
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from roster.exceptions import DatabaseError, EmailConflictError
from roster.models.student import Student
from roster.repositories.student_repository import (
    MAX_STUDENT_ID,
    MIN_STUDENT_ID,
    SqlAlchemyStudentRepository,
)


def make_student(name="Maki", email="maki@example.com") -> Student:
    return Student(name=name, email=email, date_of_birth=date(2000, 1, 5))


class TestSqlAlchemyStudentRepository:

    @pytest.mark.asyncio
    async def test_save_assigns_ids_from_one(self, db_session):
        """Ids should come from the sequence starting at 1."""
        repository = SqlAlchemyStudentRepository(db_session)

        first = await repository.save(make_student())
        second = await repository.save(make_student(name="Pita", email="pita@example.com"))

        assert first.id == 1
        assert second.id == 2

    @pytest.mark.asyncio
    async def test_lookups(self, db_session):
        """Lookups by id and email should find saved rows and miss unknown ones."""
        repository = SqlAlchemyStudentRepository(db_session)
        saved = await repository.save(make_student())

        assert (await repository.find_by_id(saved.id)).email == "maki@example.com"
        assert (await repository.find_by_email("maki@example.com")).id == saved.id
        assert await repository.find_by_id(999) is None
        assert await repository.find_by_email("nobody@example.com") is None
        assert await repository.exists_by_id(saved.id) is True
        assert await repository.exists_by_id(999) is False

    @pytest.mark.asyncio
    async def test_find_all(self, db_session):
        repository = SqlAlchemyStudentRepository(db_session)
        await repository.save(make_student())
        await repository.save(make_student(name="Pita", email="pita@example.com"))

        students = await repository.find_all()

        assert [s.name for s in students] == ["Maki", "Pita"]

    @pytest.mark.asyncio
    async def test_save_persists_in_place_changes(self, db_session):
        """Attribute changes on a loaded student should be written on save."""
        repository = SqlAlchemyStudentRepository(db_session)
        saved = await repository.save(make_student())
        await db_session.commit()

        student = await repository.find_by_id(saved.id)
        student.name = "Makoto"
        await repository.save(student)
        await db_session.commit()
        db_session.expunge_all()

        reloaded = await repository.find_by_id(saved.id)
        assert reloaded.name == "Makoto"

    @pytest.mark.asyncio
    async def test_delete_by_id(self, db_session):
        repository = SqlAlchemyStudentRepository(db_session)
        saved = await repository.save(make_student())

        await repository.delete_by_id(saved.id)

        assert await repository.exists_by_id(saved.id) is False
        assert await repository.find_by_id(saved.id) is None

    @pytest.mark.asyncio
    async def test_unique_constraint_raises_email_conflict(self, db_session):
        """The unique email constraint should surface as EmailConflictError."""
        repository = SqlAlchemyStudentRepository(db_session)
        await repository.save(make_student())
        await db_session.commit()

        with pytest.raises(EmailConflictError) as exc_info:
            await repository.save(make_student(name="Copy"))

        assert exc_info.value.email == "maki@example.com"
        await db_session.rollback()
        assert len(await repository.find_all()) == 1


class TestOutOfRangeIds:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("student_id", [MAX_STUDENT_ID + 1, MIN_STUDENT_ID - 1, 10 ** 20])
    async def test_ids_outside_bigint_are_absent(self, mock_db_session, student_id):
        """Ids no BIGINT column can hold should be reported absent without a query."""
        repository = SqlAlchemyStudentRepository(mock_db_session)

        assert await repository.find_by_id(student_id) is None
        assert await repository.exists_by_id(student_id) is False
        await repository.delete_by_id(student_id)

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bigint_bounds_are_queried(self, db_session):
        """The largest storable id should still reach the database."""
        repository = SqlAlchemyStudentRepository(db_session)

        assert await repository.find_by_id(MAX_STUDENT_ID) is None
        assert await repository.exists_by_id(MIN_STUDENT_ID) is False


class TestRepositoryErrorTranslation:

    @pytest.mark.asyncio
    async def test_query_failure_becomes_database_error(self, mock_db_session):
        """Driver failures on reads should become DatabaseError with context."""
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection reset")
        )
        repository = SqlAlchemyStudentRepository(mock_db_session)

        with pytest.raises(DatabaseError) as exc_info:
            await repository.find_by_id(1)

        assert exc_info.value.context["operation"] == "find_by_id"
        assert exc_info.value.context["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_flush_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError(
            "INSERT", {}, Exception("disk full")
        )
        repository = SqlAlchemyStudentRepository(mock_db_session)

        with pytest.raises(DatabaseError):
            await repository.save(make_student())

        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "driver_message",
        [
            "UNIQUE constraint failed: students.email",
            'duplicate key value violates unique constraint "uq_students_email"',
        ],
    )
    async def test_email_violation_becomes_email_conflict(self, mock_db_session, driver_message):
        """SQLite and PostgreSQL wordings of the email violation should both map to a conflict."""
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception(driver_message)
        )
        repository = SqlAlchemyStudentRepository(mock_db_session)

        with pytest.raises(EmailConflictError) as exc_info:
            await repository.save(make_student())

        assert exc_info.value.email == "maki@example.com"

    @pytest.mark.asyncio
    async def test_other_integrity_error_becomes_database_error(self, mock_db_session):
        """A non-email integrity failure should not be reported as a duplicate email."""
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception("NOT NULL constraint failed: students.name")
        )
        repository = SqlAlchemyStudentRepository(mock_db_session)

        with pytest.raises(DatabaseError) as exc_info:
            await repository.save(make_student())

        assert exc_info.value.context["operation"] == "save"
        assert exc_info.value.context["error_type"] == "IntegrityError"
