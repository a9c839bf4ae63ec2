"""Pydantic schemas for companies."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class CompanyWrite(BaseModel):
    """Request schema for creating or updating a company."""

    name: str = Field(..., max_length=255)
    description: str | None = Field(None, max_length=1000)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
            if not (isinstance(value, str) and not value.strip())
        }


class CompanyDelete(BaseModel):
    """Destructive action: the caller re-enters their password."""
    password: str | None = None
