"""Pydantic schemas for job positions."""

from pydantic import BaseModel, Field, field_validator


class JobPositionWrite(BaseModel):
    """Request schema for creating or updating a job position."""

    name: str | None = Field(None, max_length=255, validate_default=True)

    @field_validator("name")
    @classmethod
    def require_name(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError("Name is required")
        return v.strip()
