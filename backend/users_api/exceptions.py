"""
Users API — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the failure kinds of a user operation.
Why:   Each exception carries the status code and exact client message for
       its failure, so validation helpers can stop an operation with a
       single `raise` instead of threading error values through every step.
How:   UserService raises these inside an operation; its boundary catches
       UsersApiError and turns it into an Outcome. They never reach FastAPI.

Exception Hierarchy:
    UsersApiError (base)
    ├── InvalidInputError     → 401 (400 for email format on update paths)
    ├── ConflictError         → 400 (email already in use)
    ├── NotFoundError         → 404 (no record / empty collection)
    └── OperationFailedError  → 400 (write returned no record, hashing failed)

    Anything that is not a UsersApiError is an internal failure (500).
"""

from typing import Any, Dict, Optional


class UsersApiError(Exception):
    """
    Base exception for all expected user-operation failures.

    Attributes:
        message:      Client-facing text, returned verbatim as the response body
        status_code:  HTTP status for the response
        context:      Additional debug info (logged, NOT returned to client)
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)


class InvalidInputError(UsersApiError):
    """
    Raised when a field is missing or malformed.

    HTTP: 401 by default. Callers pass status_code=400 where the contract
    reports a bad email format on update paths.
    """

    status_code = 401

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, status_code=status_code, context=ctx)
        self.field = field


class ConflictError(UsersApiError):
    """Raised when an email is already owned by a stored user."""

    status_code = 400


class NotFoundError(UsersApiError):
    """
    Raised when no record matches the requested id, or the collection is empty.

    The repository returns None for missing rows; the service converts that
    None into this exception.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "User not found",
        resource_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class OperationFailedError(UsersApiError):
    """
    Raised when a step that passed validation produced nothing.

    When: The repository write returned no record, or the password hasher
    returned its failure value.
    """

    status_code = 400
