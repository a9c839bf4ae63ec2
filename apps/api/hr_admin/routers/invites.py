"""Invitation endpoints for the current user (sent and received)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hr_admin.core.deps import get_current_user_id, get_db, require_csrf_header
from hr_admin.core.errors import ErrorCode
from hr_admin.schemas.common import Result
from hr_admin.schemas.invite import InviteCreate
from hr_admin.services import company_service, invite_service
from hr_admin.utils.responses import result_response


router = APIRouter(prefix="/invites", tags=["invites"])


def _outcome(done: bool, message: str) -> Result:
    if done:
        return Result.ok()
    return Result.fail(ErrorCode.NOT_FOUND, message)


@router.get("")
async def list_invites(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Invites sent or received by the caller, newest first."""
    return result_response(Result.ok({
        "invites": invite_service.list_user_invites(db, user_id),
        "has_pending": invite_service.has_any_pending_invites(db, user_id),
    }))


@router.get("/users")
async def find_users(
    email: str = Query(..., min_length=1),
    company_id: int | None = Query(None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Users matching email; has_invite marks pending invites into company_id."""
    return result_response(Result.ok(invite_service.find_users_by_email(db, email, company_id)))


@router.post("", dependencies=[Depends(require_csrf_header)])
async def create_invites(
    body: InviteCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Invite users into a company the caller belongs to."""
    if company_service.member_company(db, user_id, body.company_id) is None:
        return result_response(Result.fail(ErrorCode.UNAUTHORIZED, "Access denied"))

    if invite_service.unknown_user_ids(db, body.user_ids):
        return result_response(Result.fail(
            ErrorCode.VALIDATION_FAILED,
            "The selected users are invalid.",
            errors={"user_ids": ["The selected users are invalid."]},
        ))

    if not invite_service.create_invites(db, user_id, body.user_ids, body.company_id):
        return result_response(Result.fail(
            ErrorCode.VALIDATION_FAILED,
            "No users to invite",
            errors={"user_ids": ["No users to invite"]},
        ))
    return result_response(Result.ok(), success_status=201)


@router.post("/{invite_id}/accept", dependencies=[Depends(require_csrf_header)])
async def accept_invite(
    invite_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    done = invite_service.accept_invite(db, invite_id, user_id)
    return result_response(_outcome(done, "Invite not found or no longer pending"))


@router.post("/{invite_id}/reject", dependencies=[Depends(require_csrf_header)])
async def reject_invite(
    invite_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    done = invite_service.reject_invite(db, invite_id, user_id)
    return result_response(_outcome(done, "Invite not found or no longer pending"))


@router.delete("/{invite_id}", dependencies=[Depends(require_csrf_header)])
async def delete_invite(
    invite_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    done = invite_service.delete_invite(db, invite_id, user_id)
    return result_response(_outcome(done, "Invite not found"))
