"""Turn pydantic validation failures into field-level service errors."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from hr_admin.core.errors import ValidationFailedError


SchemaT = TypeVar("SchemaT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def _field_label(field: str) -> str:
    return field.replace("_", " ")


def _message(error: dict[str, Any], field: str) -> str:
    if error["type"] == "missing":
        return f"The {_field_label(field)} field is required."
    message = error["msg"]
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    return message


def validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by top-level field name."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        field = str(loc[0])
        errors.setdefault(field, []).append(_message(error, field))
    return errors


def parse_payload(schema: type[SchemaT], data: Any) -> SchemaT:
    """
    Validate raw input against schema.

    Raises:
        ValidationFailedError: With per-field messages; the first one
            becomes the top-level message
    """
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data or {})
    except ValidationError as exc:
        raise ValidationFailedError(errors=validation_errors(exc)) from exc
