"""Classify database integrity errors into field-level conflicts."""

import re

from sqlalchemy.exc import IntegrityError


# Constraint names follow the naming convention in hr_admin.db.base
CONSTRAINT_FIELDS = {
    "uq_employee_employee_code": "employee_code",
    "uq_employee_company_id_email": "email",
    "uq_employee_company_id_national_id": "national_id",
}

# SQLite does not report constraint names, only "table.column" lists
COLUMN_FIELDS = {
    ("employee", "employee_code"): "employee_code",
    ("employee", "email"): "email",
    ("employee", "national_id"): "national_id",
}

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: ([\w.,\s]+)")


def unique_violation_fields(error: IntegrityError) -> list[str]:
    """
    Return the model fields involved in a unique-constraint violation.

    Uses the driver's structured constraint name when available
    (psycopg ``diag.constraint_name``), otherwise the column list SQLite
    puts in its error. Returns an empty list for other integrity errors.
    """
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name:
        field = CONSTRAINT_FIELDS.get(constraint_name)
        return [field] if field else []

    message = str(error.orig) if error.orig else str(error)
    match = _SQLITE_UNIQUE.search(message)
    if not match:
        return []

    fields: list[str] = []
    for qualified in match.group(1).split(","):
        table, _, column = qualified.strip().partition(".")
        field = COLUMN_FIELDS.get((table, column))
        if field and field not in fields:
            fields.append(field)
    return fields


def conflict_errors(fields: list[str]) -> dict[str, list[str]]:
    """Per-field duplicate messages, e.g. {"email": ["The email has already been taken."]}."""
    return {
        field: [f"The {field.replace('_', ' ')} has already been taken."]
        for field in fields
    }
