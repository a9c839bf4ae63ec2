"""Employee endpoints, scoped to the caller's active company."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from hr_admin.core.deps import get_db, get_request_context, require_csrf_header
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.employee import EmployeeLink, EmployeeStatusUpdate
from hr_admin.services import employee_service, membership_service
from hr_admin.utils.pagination import PaginationParams, get_pagination
from hr_admin.utils.responses import result_response


router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("")
async def list_employees(
    search: str = Query("", description="Substring match on name, email, code or phone"),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    result = employee_service.list_employees(
        db, ctx, page=pagination.page, per_page=pagination.per_page, search=search
    )
    return result_response(result)


@router.get("/archived")
async def list_archived_employees(
    search: str = Query(""),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    result = employee_service.list_employees(
        db, ctx, page=pagination.page, per_page=pagination.per_page, search=search, archived=True
    )
    return result_response(result)


@router.get("/search")
async def search_employees(
    q: str = Query(""),
    limit: int = Query(20),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(employee_service.search_employees(db, ctx, q, limit))


@router.get("/{employee_id}")
async def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(employee_service.get_employee(db, ctx, employee_id))


@router.post("", dependencies=[Depends(require_csrf_header)])
async def create_employee(
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(employee_service.create_employee(db, ctx, body), success_status=201)


@router.put("/{employee_id}", dependencies=[Depends(require_csrf_header)])
async def update_employee(
    employee_id: int,
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(employee_service.update_employee(db, ctx, employee_id, body))


@router.post("/{employee_id}/status", dependencies=[Depends(require_csrf_header)])
async def update_employee_status(
    employee_id: int,
    body: EmployeeStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Set active / suspended / archived / deleted. Deleting requires the caller's password."""
    result = employee_service.update_employee_status(
        db, ctx, employee_id, body.status, password=body.password
    )
    return result_response(result)


@router.post("/{employee_id}/link", dependencies=[Depends(require_csrf_header)])
async def link_employee(
    employee_id: int,
    body: EmployeeLink,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Link to a platform user; ALREADY_LINKED asks the client to retry with force."""
    result = membership_service.link_employee_to_user(
        db, ctx, employee_id, body.user_id, role=body.role, force=body.force
    )
    return result_response(result)
