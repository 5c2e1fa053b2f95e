"""
Roster Backend: Database Session Management
=============================================

What:  Async SQLAlchemy engine, session factory, declarative base, and the
       FastAPI session dependency.
How:   One engine per process with a connection pool; one session per
       request that commits on success and rolls back on any error.
Who:   Route dependencies (``get_db_session``), models (``Base``), Alembic,
       and the health check (``engine``).

Connection Pooling (PostgreSQL):
    pool_size / max_overflow:  from settings (defaults 20 + 10)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections hourly

SQLite URLs get the driver's default pool and none of the options above.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from roster.config import settings


def _engine_options() -> Dict[str, Any]:
    """Build engine keyword arguments appropriate for the configured backend."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine ────────────────────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False keeps attributes readable after the request commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single ``metadata`` object, which Alembic reads for
    ``--autogenerate`` and tests use for ``create_all``.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the request's dependencies and handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    Business-rule errors raised by the service (e.g. EmailTakenError) also
    pass through step 4, so nothing staged during a failed request is kept.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close every pooled connection. Called from the application lifespan."""
    await engine.dispose()
