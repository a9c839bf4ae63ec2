"""Tenancy resolver - determines a user's single active company."""

from sqlalchemy.orm import Session

from hr_admin.core.errors import NoActiveCompanyError, NotAuthenticatedError
from hr_admin.db.enums import Role
from hr_admin.db.models import Company, Membership
from hr_admin.schemas.auth import RequestContext


def get_active_membership(db: Session, user_id: int) -> Membership | None:
    """Get the user's active membership in a non-deleted company."""
    return (
        db.query(Membership)
        .join(Company, Company.id == Membership.company_id)
        .filter(
            Membership.user_id == user_id,
            Membership.active.is_(True),
            Company.is_deleted.is_(False),
        )
        .first()
    )


def resolve_active_company(db: Session, user_id: int | None) -> int | None:
    """
    Resolve the caller's active company id.

    Pure read, no caching: a single indexed lookup on every call.
    Returns None when the user has no active membership.
    """
    if not user_id:
        return None
    membership = get_active_membership(db, user_id)
    return membership.company_id if membership else None


def build_request_context(db: Session, user_id: int | None) -> RequestContext:
    """Build the per-request context (user, active company, role in it)."""
    if not user_id:
        return RequestContext()
    membership = get_active_membership(db, user_id)
    if not membership:
        return RequestContext(user_id=user_id)
    return RequestContext(
        user_id=user_id,
        company_id=membership.company_id,
        role=Role.coerce(membership.role),
    )


def require_company(ctx: RequestContext) -> int:
    """
    Return the active company id or raise the matching domain error.

    Raises:
        NotAuthenticatedError: No caller id
        NoActiveCompanyError: Caller has no active company
    """
    if not ctx.is_authenticated:
        raise NotAuthenticatedError()
    if ctx.company_id is None:
        raise NoActiveCompanyError()
    return ctx.company_id
