"""Response envelopes shared by every service operation."""

from typing import Any

from pydantic import BaseModel

from hr_admin.core.errors import ErrorCode, ServiceError


class Result(BaseModel):
    """
    Uniform operation outcome.

    Expected business conditions (not found, no active company,
    validation, conflicts, authorization) are reported here with
    success=False and a code; they are never raised to the caller.
    """
    success: bool
    data: Any = None
    message: str | None = None
    errors: dict[str, list[str]] | None = None
    code: ErrorCode | None = None

    @classmethod
    def ok(cls, data: Any = None, message: str | None = None, code: ErrorCode | None = None) -> "Result":
        return cls(success=True, data=data, message=message, code=code)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        errors: dict[str, list[str]] | None = None,
        data: Any = None,
    ) -> "Result":
        return cls(success=False, code=code, message=message, errors=errors, data=data)

    @classmethod
    def from_error(cls, exc: ServiceError, data: Any = None) -> "Result":
        return cls.fail(exc.code, exc.message, errors=exc.errors, data=data)


class Page(BaseModel):
    """Pagination envelope: {data, total, page, per_page, last_page}."""
    data: list[dict[str, Any]]
    total: int
    page: int
    per_page: int
    last_page: int


class CatalogStatusUpdate(BaseModel):
    """Request schema for department / job position status changes."""
    status: str
