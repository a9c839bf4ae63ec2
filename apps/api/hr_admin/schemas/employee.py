"""Pydantic schemas for employees."""

import re
from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


# Letters of any script plus spaces and simple punctuation
NAME_PATTERN = re.compile(r"^(?:[^\W\d_]|[\s'.\-])+$")
NATIONALITY_PATTERN = re.compile(r"^(?:[^\W\d_]|[\s'\-])+$")
PHONE_PATTERN = re.compile(r"^[+\d\s\-()]+$")
DIGITS_PATTERN = re.compile(r"^\d+$")
ALNUM_PATTERN = re.compile(r"^[A-Za-z0-9]+$")

DEFAULT_CURRENCY = "usd"


def _check_format(value: str | None, pattern: re.Pattern, label: str) -> str | None:
    if value is None:
        return None
    if not pattern.match(value):
        raise ValueError(f"The {label} format is invalid.")
    return value


class EmployeeWrite(BaseModel):
    """
    Request schema for creating or fully replacing an employee.

    Blank strings count as "not provided" so required fields report
    "The <field> field is required." and optional ones become None.
    """

    # Basic identity
    full_name: str = Field(..., max_length=255)
    email: EmailStr | None = Field(None, max_length=255)
    phone: str = Field(..., max_length=50)
    national_id: str = Field(..., max_length=100)
    picture_url: str | None = Field(None, max_length=500)

    # Employment
    job_title: str | None = Field(None, max_length=255)
    department_id: int | None = None
    manager_id: int | None = None
    hire_date: date

    # Location
    work_location: str | None = Field(None, max_length=255)
    address: str | None = None
    country: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)

    # Financial
    salary: Decimal = Decimal("0")
    currency: str = Field(DEFAULT_CURRENCY, max_length=10)
    bank_name: str | None = Field(None, max_length=255)
    bank_account_number: str | None = Field(None, max_length=100)
    iban: str | None = Field(None, max_length=100)

    # Additional
    birth_date: date | None = None
    gender: Literal["male", "female"] | None = None
    marital_status: str | None = Field(None, max_length=50)
    nationality: str | None = Field(None, max_length=100)
    emergency_contact: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        """Treat empty strings and explicit nulls as omitted (picture_url excepted)."""
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
            if key != "picture_url" and (value is None or value == ""):
                continue
            cleaned[key] = value
        return cleaned

    @field_validator("picture_url")
    @classmethod
    def blank_picture_is_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        return _check_format(v, NAME_PATTERN, "full name")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _check_format(v, PHONE_PATTERN, "phone")

    @field_validator("national_id")
    @classmethod
    def validate_national_id(cls, v: str) -> str:
        return _check_format(v, DIGITS_PATTERN, "national id")

    @field_validator("bank_account_number", "iban")
    @classmethod
    def validate_alphanumeric(cls, v: str | None, info) -> str | None:
        return _check_format(v, ALNUM_PATTERN, info.field_name.replace("_", " "))

    @field_validator("nationality")
    @classmethod
    def validate_nationality(cls, v: str | None) -> str | None:
        return _check_format(v, NATIONALITY_PATTERN, "nationality")

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.lower()

    @field_validator("department_id", "manager_id")
    @classmethod
    def non_positive_is_none(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            return None
        return v

    def column_values(self) -> dict[str, Any]:
        """Values written to the employee row (picture_url handled separately)."""
        values = self.model_dump(exclude={"picture_url"})
        if values.get("email") is not None:
            values["email"] = str(values["email"])
        return values


class EmployeeStatusUpdate(BaseModel):
    """Request schema for an employee status change."""
    status: str
    password: str | None = None


class EmployeeLink(BaseModel):
    """Request schema for linking an employee to a platform user."""
    user_id: int
    role: str | None = "employee"
    force: bool = False
