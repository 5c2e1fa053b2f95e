"""
Roster Backend: Pydantic Request/Response Schemas
===================================================

What:  The API contract for the students endpoints.
How:   FastAPI validates request bodies against these models, serializes
       responses through them, and builds the OpenAPI docs from them.

Wire format:
    JSON keys are camelCase (``dateOfBirth``). Request bodies also accept
    the snake_case field names. Dates are ISO 8601 (YYYY-MM-DD).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

_camel_config = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class StudentCreate(BaseModel):
    """
    Body of POST /api/v1/students.

    No ``id`` field: ids are assigned by the database. An ``id`` key in the
    incoming JSON is ignored.
    """
    name: str = Field(description="Student's full name")
    email: str = Field(description="Email address, unique across all students")
    date_of_birth: date = Field(description="Date of birth (YYYY-MM-DD)")

    model_config = _camel_config


class StudentUpdate(BaseModel):
    """
    Body of PUT /api/v1/students/{studentId}.

    Both fields are optional. A field that is missing, null, empty, or equal
    to the stored value leaves that column untouched.
    """
    name: Optional[str] = Field(default=None, description="New name")
    email: Optional[str] = Field(default=None, description="New email address")

    model_config = _camel_config


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class StudentResponse(BaseModel):
    """A stored student, including the derived ``age``."""
    id: int = Field(description="Database-assigned identifier")
    name: str
    email: str
    date_of_birth: date
    age: int = Field(description="Whole years since date of birth, computed on read")

    model_config = {**_camel_config, "from_attributes": True}


class MessageResponse(BaseModel):
    """Plain acknowledgement for mutations that return no record."""
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response raised by the app.

    Example:
        {
            "error": "email_taken",
            "message": "Email already taken",
            "details": {"email": "pita@example.com"},
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Body of GET /health."""
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
