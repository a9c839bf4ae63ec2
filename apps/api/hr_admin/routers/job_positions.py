"""Job position endpoints, scoped to the caller's active company."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from hr_admin.core.deps import get_db, get_request_context, require_csrf_header
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import CatalogStatusUpdate
from hr_admin.services import job_position_service
from hr_admin.utils.pagination import PaginationParams, get_pagination
from hr_admin.utils.responses import result_response


router = APIRouter(prefix="/job-positions", tags=["job-positions"])


@router.get("")
async def list_job_positions(
    search: str = Query(""),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    result = job_position_service.list_job_positions(
        db, ctx, page=pagination.page, per_page=pagination.per_page, search=search
    )
    return result_response(result)


@router.get("/archived")
async def list_archived_job_positions(
    search: str = Query(""),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    result = job_position_service.list_job_positions(
        db, ctx, page=pagination.page, per_page=pagination.per_page, search=search, archived=True
    )
    return result_response(result)


@router.get("/search")
async def search_job_positions(
    q: str = Query(""),
    limit: int = Query(20),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(job_position_service.search_job_positions(db, ctx, q, limit))


@router.get("/{position_id}")
async def get_job_position(
    position_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(job_position_service.get_job_position(db, ctx, position_id))


@router.post("", dependencies=[Depends(require_csrf_header)])
async def create_job_position(
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(job_position_service.create_job_position(db, ctx, body), success_status=201)


@router.put("/{position_id}", dependencies=[Depends(require_csrf_header)])
async def update_job_position(
    position_id: int,
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    return result_response(job_position_service.update_job_position(db, ctx, position_id, body))


@router.post("/{position_id}/status", dependencies=[Depends(require_csrf_header)])
async def update_job_position_status(
    position_id: int,
    body: CatalogStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Archive, restore, or permanently delete (status=deleted removes the row)."""
    return result_response(
        job_position_service.update_job_position_status(db, ctx, position_id, body.status)
    )
