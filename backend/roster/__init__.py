"""
Roster Backend: Application Package
=====================================

What: The Roster student registry service.
Who:  Imported by uvicorn (``roster.main:app``), Alembic, and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP handlers)       │  ← status codes, request/response shapes
    ├─────────────────────────────────────┤
    │      Services (business rules)      │  ← email uniqueness, partial updates
    ├─────────────────────────────────────┤
    │     Repositories (record store)     │  ← lookups, inserts, deletes
    ├─────────────────────────────────────┤
    │  Models & Schemas / Database layer  │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

Each layer only talks to the one directly beneath it.
"""

__version__ = "1.0.0"
