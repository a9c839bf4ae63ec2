"""
Authorization gate - role and ownership rules applied at the point of use.

Rules:
- Company update/delete: caller must own the (non-deleted) company.
- Member listing: manager/hr see every member; other roles see themselves.
- Destructive actions (company delete, employee soft delete) require the
  caller's password to be re-entered and verified on that same request.
"""

import logging

from sqlalchemy.orm import Session

from hr_admin.core.errors import UnauthorizedError
from hr_admin.core.security import verify_password
from hr_admin.db.enums import ROLES_CAN_VIEW_ALL_MEMBERS, Role
from hr_admin.db.models import Company, User


logger = logging.getLogger(__name__)


def can_view_all_members(role: Role | str | None) -> bool:
    """Check if a membership role may see every member of the company."""
    if role is None:
        return False
    return Role.coerce(role) in ROLES_CAN_VIEW_ALL_MEMBERS


def is_company_owner(db: Session, user_id: int, company_id: int) -> bool:
    """Check if user owns the company (deleted companies have no owner)."""
    return (
        db.query(Company.id)
        .filter(
            Company.id == company_id,
            Company.owner_user_id == user_id,
            Company.is_deleted.is_(False),
        )
        .first()
        is not None
    )


def require_company_owner(db: Session, user_id: int, company_id: int) -> None:
    """
    Raises:
        UnauthorizedError: Caller is not the owner
    """
    if not is_company_owner(db, user_id, company_id):
        raise UnauthorizedError("Only the company owner can perform this action")


def confirm_password(db: Session, user_id: int | None, password: str | None) -> None:
    """
    Verify the caller's password immediately before a destructive action.

    There is no "recently confirmed" window: every destructive call
    must carry the password.

    Raises:
        UnauthorizedError: Password missing or wrong
    """
    if not password:
        raise UnauthorizedError("Password is required")
    user = db.get(User, user_id) if user_id else None
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Password re-confirmation failed for user_id=%s", user_id)
        raise UnauthorizedError("Invalid password")
