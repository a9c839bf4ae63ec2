"""Domain error taxonomy shared by the service layer.

Service helpers raise ``ServiceError`` subclasses; public service operations
catch them (see ``returns_result``) and hand the caller a failed ``Result``
envelope. Infrastructure errors (connection loss, programming errors) are
never caught here and propagate to the outer application handler.
"""

import functools
from enum import Enum
from typing import Any, Callable, TypeVar


class ErrorCode(str, Enum):
    """Machine-readable failure codes carried by failed results."""
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NO_ACTIVE_COMPANY = "NO_ACTIVE_COMPANY"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    ALREADY_LINKED = "ALREADY_LINKED"


class ServiceError(Exception):
    """Base exception for expected business failures."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED
    default_message = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class NotAuthenticatedError(ServiceError):
    """No caller id available."""

    code = ErrorCode.NOT_AUTHENTICATED
    default_message = "Unauthorized"


class NoActiveCompanyError(ServiceError):
    """Caller has no active membership."""

    code = ErrorCode.NO_ACTIVE_COMPANY
    default_message = "No active company selected"


class NotFoundError(ServiceError):
    """Row missing or outside the caller's tenant (deliberately indistinguishable)."""

    code = ErrorCode.NOT_FOUND
    default_message = "Not found"


class ValidationFailedError(ServiceError):
    """Field-level validation failure."""

    code = ErrorCode.VALIDATION_FAILED
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ):
        # Promote the first field error to the top-level message
        if message is None and errors:
            for messages in errors.values():
                if messages:
                    message = messages[0]
                    break
        super().__init__(message, errors)


class ConflictError(ServiceError):
    """Unique constraint violation on create/update."""

    code = ErrorCode.CONFLICT
    default_message = "Duplicate value"


class UnauthorizedError(ServiceError):
    """Ownership, role, or password re-confirmation check failed."""

    code = ErrorCode.UNAUTHORIZED
    default_message = "Access denied"


class AlreadyLinkedError(ServiceError):
    """Employee already linked to another user and force was not set."""

    code = ErrorCode.ALREADY_LINKED
    default_message = "Employee is already linked to another user"


F = TypeVar("F", bound=Callable[..., Any])


def returns_result(func: F) -> F:
    """
    Convert ServiceError raised by a service operation into a failed Result.

    Usage:
        @returns_result
        def create_department(db, ctx, data) -> Result:
            ...
    """
    from hr_admin.schemas.common import Result

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ServiceError as exc:
            return Result.from_error(exc)

    return wrapper  # type: ignore[return-value]
