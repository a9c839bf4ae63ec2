"""Pydantic schemas for departments."""

from pydantic import BaseModel, Field, field_validator


class DepartmentWrite(BaseModel):
    """Request schema for creating or updating a department."""

    name: str | None = Field(None, max_length=255, validate_default=True)
    admin_id: int | None = Field(None, validate_default=True)

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("admin_id")
    @classmethod
    def require_admin(cls, v: int | None) -> int:
        if not v or v <= 0:
            raise ValueError("Admin is required")
        return v
