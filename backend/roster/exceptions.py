"""
Roster Backend: Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a client-safe ``message`` and a ``context``
       dict for logs. Global handlers registered in ``roster.main`` turn
       them into JSON error responses with the right status code.
Who:   Raised by the service and repository layers; routes never catch them.

Exception Hierarchy:
    RosterError (base)
    ├── NotFoundError             → 404 Not Found
    ├── EmailConflictError        → 400 Bad Request (store-level unique violation)
    │   ├── DuplicateEmailError   → 400 Bad Request (create with an existing email)
    │   └── EmailTakenError       → 400 Bad Request (update onto another student's email)
    └── DatabaseError             → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class RosterError(Exception):
    """
    Base exception for all Roster application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(RosterError):
    """
    Raised when the referenced student id has no record.

    HTTP: 404 Not Found. Not retried; the id is simply unknown.
    """

    def __init__(
        self,
        resource: str = "Student",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if resource_id is None:
            message = f"The requested {resource.lower()} was not found"
        else:
            message = f"{resource} with id {resource_id} does not exist."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class EmailConflictError(RosterError):
    """
    Raised when a write would leave two students with the same email.

    The repository raises this directly when the database's unique
    constraint rejects a flush. The service narrows it to
    DuplicateEmailError or EmailTakenError depending on the operation.
    """

    default_message = "Email conflicts with an existing student"

    def __init__(
        self,
        email: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if email is not None:
            ctx["email"] = email
        super().__init__(message=message or self.default_message, context=ctx)
        self.email = email


class DuplicateEmailError(EmailConflictError):
    """
    Raised when a create targets an email already present.

    HTTP: 400 Bad Request. The caller must resubmit with a different email.
    """

    default_message = "Email already exists"


class EmailTakenError(EmailConflictError):
    """
    Raised when an update would move a student onto another student's email.

    HTTP: 400 Bad Request. No part of the update is committed.
    """

    default_message = "Email already taken"


class DatabaseError(RosterError):
    """
    Raised when a database operation fails for infrastructure reasons.

    HTTP: 500 Internal Server Error. The response message is always generic;
    the original error type and operation are only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
