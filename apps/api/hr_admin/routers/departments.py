"""Department endpoints, scoped to the caller's active company."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from hr_admin.core.deps import get_db, get_request_context, require_csrf_header
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import CatalogStatusUpdate
from hr_admin.services import department_service
from hr_admin.utils.pagination import PaginationParams, get_pagination
from hr_admin.utils.responses import result_response


router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("")
async def list_departments(
    search: str = Query(""),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    result = department_service.list_departments(
        db, ctx, page=pagination.page, per_page=pagination.per_page, search=search
    )
    return result_response(result)


@router.get("/archived")
async def list_archived_departments(
    search: str = Query(""),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    result = department_service.list_departments(
        db, ctx, page=pagination.page, per_page=pagination.per_page, search=search, archived=True
    )
    return result_response(result)


@router.get("/search")
async def search_departments(
    q: str = Query(""),
    limit: int = Query(20),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(department_service.search_departments(db, ctx, q, limit))


@router.get("/{department_id}")
async def get_department(
    department_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(department_service.get_department(db, ctx, department_id))


@router.post("", dependencies=[Depends(require_csrf_header)])
async def create_department(
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(department_service.create_department(db, ctx, body), success_status=201)


@router.put("/{department_id}", dependencies=[Depends(require_csrf_header)])
async def update_department(
    department_id: int,
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(department_service.update_department(db, ctx, department_id, body))


@router.post("/{department_id}/status", dependencies=[Depends(require_csrf_header)])
async def update_department_status(
    department_id: int,
    body: CatalogStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Archive, restore, or permanently delete (status=deleted removes the row)."""
    return result_response(
        department_service.update_department_status(db, ctx, department_id, body.status)
    )
