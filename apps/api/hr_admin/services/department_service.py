"""Department service - tenant-scoped departments with an employee admin."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from hr_admin.core.errors import ValidationFailedError, returns_result
from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.models import Department
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import Result
from hr_admin.schemas.department import DepartmentWrite
from hr_admin.services import employee_service
from hr_admin.services.scoped_repository import ArchiveStatus, ScopedRepository
from hr_admin.services.tenancy_service import require_company
from hr_admin.utils.validation import parse_payload


logger = logging.getLogger(__name__)

NEW_WINDOW = timedelta(hours=24)


def _is_new(created_at: datetime | None) -> bool:
    """Created within the last 24 hours (naive timestamps are UTC)."""
    if created_at is None:
        return False
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc) - created_at < NEW_WINDOW


def serialize_department(department: Department) -> dict[str, Any]:
    return {
        "id": department.id,
        "name": department.name,
        "admin_id": department.admin_id,
        "admin_name": department.admin.full_name if department.admin else None,
        "is_archived": department.is_archived,
        "is_new": _is_new(department.created_at),
        "created_at": department.created_at.isoformat() if department.created_at else None,
        "updated_at": department.updated_at.isoformat() if department.updated_at else None,
    }


repository = ScopedRepository(
    Department,
    entity="department",
    name_column="name",
    search_columns=("name",),
    status_model=ArchiveStatus(),
    serializer=serialize_department,
)


def _require_admin(db: Session, company_id: int, admin_id: int) -> None:
    """
    Raises:
        ValidationFailedError: Admin is not a non-deleted employee of the company
    """
    if employee_service.repository.get(db, company_id, admin_id) is None:
        raise ValidationFailedError("Invalid admin", errors={"admin_id": ["Invalid admin"]})


def list_departments(
    db: Session,
    ctx: RequestContext,
    page: int | None = 1,
    per_page: int | None = 10,
    search: str | None = "",
    archived: bool = False,
) -> Result:
    return repository.list(db, ctx, page=page, per_page=per_page, search=search, archived=archived)


def get_department(db: Session, ctx: RequestContext, department_id: int) -> Result:
    return repository.details(db, ctx, department_id)


def search_departments(db: Session, ctx: RequestContext, query: str | None, limit: int | None = 20) -> Result:
    return repository.search_by_name(db, ctx, query, limit)


@returns_result
def create_department(db: Session, ctx: RequestContext, data: dict | DepartmentWrite) -> Result:
    company_id = require_company(ctx)
    payload = parse_payload(DepartmentWrite, data)
    _require_admin(db, company_id, payload.admin_id)

    department = Department(company_id=company_id, name=payload.name, admin_id=payload.admin_id)
    db.add(department)
    db.commit()

    logger.info(
        "Department created %s",
        format_log_context(build_log_context(
            user_id=ctx.user_id,
            company_id=company_id,
            entity="department",
            entity_id=department.id,
            action="create",
        )),
    )
    return Result.ok({"id": department.id})


@returns_result
def update_department(
    db: Session,
    ctx: RequestContext,
    department_id: int,
    data: dict | DepartmentWrite,
) -> Result:
    company_id = require_company(ctx)
    department = repository.require(db, company_id, department_id)
    payload = parse_payload(DepartmentWrite, data)
    _require_admin(db, company_id, payload.admin_id)

    department.name = payload.name
    department.admin_id = payload.admin_id
    db.commit()

    logger.info(
        "Department updated %s",
        format_log_context(build_log_context(
            user_id=ctx.user_id,
            company_id=company_id,
            entity="department",
            entity_id=department_id,
            action="update",
        )),
    )
    return Result.ok({"id": department_id})


def update_department_status(
    db: Session,
    ctx: RequestContext,
    department_id: int,
    status: str,
) -> Result:
    """archived / active toggle the flag; deleted removes the row."""
    return repository.update_status(db, ctx, department_id, status)
