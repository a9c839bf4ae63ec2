"""Employee service - tenant-scoped employee records."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hr_admin.core.errors import ConflictError, ValidationFailedError, returns_result
from hr_admin.core.permissions import can_view_all_members, confirm_password
from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.enums import EmployeeStatus
from hr_admin.db.models import Department, Employee
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import Result
from hr_admin.schemas.employee import EmployeeWrite
from hr_admin.services.scoped_repository import ExclusiveFlagStatus, ScopedRepository
from hr_admin.services.storage_service import get_storage
from hr_admin.services.tenancy_service import require_company
from hr_admin.utils.db_errors import conflict_errors, unique_violation_fields
from hr_admin.utils.validation import parse_payload


logger = logging.getLogger(__name__)


EMPLOYEE_STATUS = ExclusiveFlagStatus({
    EmployeeStatus.ACTIVE.value: "is_active",
    EmployeeStatus.SUSPENDED.value: "is_suspended",
    EmployeeStatus.ARCHIVED.value: "is_archived",
    EmployeeStatus.DELETED.value: "is_deleted",
})


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def employee_status(employee: Employee) -> str:
    return EMPLOYEE_STATUS.current(employee) or EmployeeStatus.ACTIVE.value


def serialize_employee(employee: Employee) -> dict[str, Any]:
    """Full employee payload for details."""
    return {
        "id": employee.id,
        "company_id": employee.company_id,
        "user_id": employee.user_id,
        "employee_code": employee.employee_code,
        "full_name": employee.full_name,
        "email": employee.email,
        "phone": employee.phone,
        "national_id": employee.national_id,
        "picture_url": employee.picture_url,
        "job_title": employee.job_title,
        "department_id": employee.department_id,
        "department_name": employee.department.name if employee.department else None,
        "manager_id": employee.manager_id,
        "manager_name": employee.manager.full_name if employee.manager else None,
        "hire_date": _iso(employee.hire_date),
        "work_location": employee.work_location,
        "address": employee.address,
        "country": employee.country,
        "city": employee.city,
        "salary": str(employee.salary) if employee.salary is not None else None,
        "currency": employee.currency,
        "bank_name": employee.bank_name,
        "bank_account_number": employee.bank_account_number,
        "iban": employee.iban,
        "birth_date": _iso(employee.birth_date),
        "gender": employee.gender,
        "marital_status": employee.marital_status,
        "nationality": employee.nationality,
        "emergency_contact": employee.emergency_contact,
        "status": employee_status(employee),
        "created_at": _iso(employee.created_at),
        "updated_at": _iso(employee.updated_at),
    }


def serialize_employee_row(employee: Employee) -> dict[str, Any]:
    """Compact row for list pages."""
    return {
        "id": employee.id,
        "employee_code": employee.employee_code,
        "full_name": employee.full_name,
        "email": employee.email,
        "phone": employee.phone,
        "job_title": employee.job_title,
        "department_name": employee.department.name if employee.department else None,
        "manager_name": employee.manager.full_name if employee.manager else None,
        "hire_date": _iso(employee.hire_date),
        "picture_url": employee.picture_url,
        "status": employee_status(employee),
    }


def employee_visibility(ctx: RequestContext) -> list:
    """Manager/hr read every employee; other roles only their own linked record."""
    if can_view_all_members(ctx.role):
        return []
    return [Employee.user_id == ctx.user_id]


repository = ScopedRepository(
    Employee,
    entity="employee",
    name_column="full_name",
    search_columns=("full_name", "email", "employee_code", "phone"),
    status_model=EMPLOYEE_STATUS,
    serializer=serialize_employee,
    list_serializer=serialize_employee_row,
    visibility=employee_visibility,
)


# =============================================================================
# Helpers
# =============================================================================

def _now() -> datetime:
    return datetime.now()


def generate_employee_code(company_id: int, full_name: str | None, now: datetime | None = None) -> str:
    """
    Build "<company_id><INITIAL><YYYYMMDDHHMMSS>".

    Uniqueness is enforced only by the database constraint; two employees
    with the same initial created in the same second collide.
    """
    initial = (full_name or "").strip()[:1].upper() or "X"
    return f"{company_id}{initial}{(now or _now()).strftime('%Y%m%d%H%M%S')}"


def _validate_references(
    db: Session,
    company_id: int,
    payload: EmployeeWrite,
    employee_id: int | None = None,
) -> None:
    """
    Department and manager must belong to the same company.

    Raises:
        ValidationFailedError: Foreign, missing or self references
    """
    errors: dict[str, list[str]] = {}

    if payload.department_id is not None:
        department = (
            db.query(Department.id)
            .filter(
                Department.id == payload.department_id,
                Department.company_id == company_id,
            )
            .first()
        )
        if not department:
            errors["department_id"] = ["The selected department is invalid."]

    if payload.manager_id is not None:
        if employee_id is not None and payload.manager_id == employee_id:
            errors["manager_id"] = ["An employee cannot be their own manager."]
        elif repository.get(db, company_id, payload.manager_id) is None:
            errors["manager_id"] = ["The selected manager is invalid."]

    if errors:
        raise ValidationFailedError(errors=errors)


def _commit_or_conflict(db: Session) -> None:
    """
    Commit, translating unique violations into ConflictError.

    Raises:
        ConflictError: Duplicate employee_code, email or national_id
        IntegrityError: Any other integrity failure
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        fields = unique_violation_fields(exc)
        if not fields:
            raise
        logger.warning("Employee write rejected: duplicate %s", ", ".join(fields))
        raise ConflictError(
            f"Duplicate value for: {', '.join(fields)}",
            errors=conflict_errors(fields),
        ) from exc


def _commit_with_picture_cleanup(db: Session, new_picture: str | None) -> None:
    """Commit; if the write fails, remove the object stored for this write."""
    try:
        _commit_or_conflict(db)
    except Exception:
        if new_picture:
            get_storage().delete(new_picture)
        raise


def _submitted_picture(data: dict | EmployeeWrite) -> str | None:
    value = data.picture_url if isinstance(data, EmployeeWrite) else (data or {}).get("picture_url")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _parse_or_discard_picture(
    db: Session,
    company_id: int,
    data: dict | EmployeeWrite,
    employee: Employee | None = None,
) -> EmployeeWrite:
    """Validate the payload; on rejection remove a picture stored for this write."""
    try:
        payload = parse_payload(EmployeeWrite, data)
        _validate_references(db, company_id, payload, employee_id=employee.id if employee else None)
    except ValidationFailedError:
        picture = _submitted_picture(data)
        if picture and (employee is None or picture != employee.picture_url):
            get_storage().delete(picture)
        raise
    return payload


def _log(ctx: RequestContext, company_id: int, employee_id: int | None, action: str) -> str:
    return format_log_context(build_log_context(
        user_id=ctx.user_id,
        company_id=company_id,
        entity="employee",
        entity_id=employee_id,
        action=action,
    ))


# =============================================================================
# Operations
# =============================================================================

def list_employees(
    db: Session,
    ctx: RequestContext,
    page: int | None = 1,
    per_page: int | None = 10,
    search: str | None = "",
    archived: bool = False,
) -> Result:
    return repository.list(db, ctx, page=page, per_page=per_page, search=search, archived=archived)


def get_employee(db: Session, ctx: RequestContext, employee_id: int) -> Result:
    return repository.details(db, ctx, employee_id)


def search_employees(db: Session, ctx: RequestContext, query: str | None, limit: int | None = 20) -> Result:
    return repository.search_by_name(db, ctx, query, limit)


@returns_result
def create_employee(db: Session, ctx: RequestContext, data: dict | EmployeeWrite) -> Result:
    """Create an employee in the caller's active company and return its id."""
    company_id = require_company(ctx)
    payload = _parse_or_discard_picture(db, company_id, data)

    employee = Employee(
        company_id=company_id,
        employee_code=generate_employee_code(company_id, payload.full_name),
        picture_url=payload.picture_url,
        **payload.column_values(),
    )
    db.add(employee)
    _commit_with_picture_cleanup(db, payload.picture_url)

    logger.info("Employee created %s", _log(ctx, company_id, employee.id, "create"))
    return Result.ok({"id": employee.id, "employee_code": employee.employee_code})


@returns_result
def update_employee(
    db: Session,
    ctx: RequestContext,
    employee_id: int,
    data: dict | EmployeeWrite,
) -> Result:
    """
    Fully replace an employee of the caller's active company.

    picture_url is replaced only when the input carries it. After a
    successful commit the previous picture is removed from storage; if
    the write fails the newly stored picture is removed instead.
    """
    company_id = require_company(ctx)
    employee = repository.require(db, company_id, employee_id)
    payload = _parse_or_discard_picture(db, company_id, data, employee=employee)

    for field, value in payload.column_values().items():
        setattr(employee, field, value)

    old_picture = employee.picture_url
    picture_changed = (
        "picture_url" in payload.model_fields_set
        and payload.picture_url != old_picture
    )
    if picture_changed:
        employee.picture_url = payload.picture_url

    _commit_with_picture_cleanup(db, payload.picture_url if picture_changed else None)

    if picture_changed and old_picture:
        get_storage().delete(old_picture)

    logger.info("Employee updated %s", _log(ctx, company_id, employee_id, "update"))
    return Result.ok({"id": employee_id})


@returns_result
def update_employee_status(
    db: Session,
    ctx: RequestContext,
    employee_id: int,
    status: str,
    password: str | None = None,
) -> Result:
    """
    Set exactly one of active / suspended / archived / deleted.

    Soft deletion requires the caller's password on the same call.
    """
    require_company(ctx)
    if (status or "").strip().lower() == EmployeeStatus.DELETED.value:
        confirm_password(db, ctx.user_id, password)
    return repository.update_status(db, ctx, employee_id, status)
