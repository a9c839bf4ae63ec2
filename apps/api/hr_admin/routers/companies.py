"""Company endpoints: the caller's companies, lifecycle, and members."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from hr_admin.core.deps import get_current_user_id, get_db, require_csrf_header
from hr_admin.schemas.common import Result
from hr_admin.schemas.company import CompanyDelete
from hr_admin.services import company_service
from hr_admin.utils.responses import result_response


router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("")
async def list_companies(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return result_response(Result.ok(company_service.list_companies(db, user_id)))


@router.post("", dependencies=[Depends(require_csrf_header)])
async def create_company(
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return result_response(company_service.create_company(db, user_id, body), success_status=201)


@router.get("/{company_id}")
async def get_company(
    company_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return result_response(company_service.get_company_details(db, user_id, company_id))


@router.put("/{company_id}", dependencies=[Depends(require_csrf_header)])
async def update_company(
    company_id: int,
    body: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return result_response(company_service.update_company(db, user_id, company_id, body))


@router.post("/{company_id}/delete", dependencies=[Depends(require_csrf_header)])
async def delete_company(
    company_id: int,
    body: CompanyDelete,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Owner-only soft delete; the password is re-checked on this request."""
    return result_response(company_service.delete_company(db, user_id, company_id, body.password))


@router.post("/{company_id}/activate", dependencies=[Depends(require_csrf_header)])
async def activate_company(
    company_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return result_response(company_service.activate_company(db, user_id, company_id))


@router.get("/{company_id}/users")
async def get_company_users(
    company_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return result_response(company_service.get_company_users(db, user_id, company_id))
