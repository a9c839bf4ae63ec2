"""Company service - tenant lifecycle and member listing."""

import logging
from typing import Any

from sqlalchemy import case
from sqlalchemy.orm import Session

from hr_admin.core.errors import NotAuthenticatedError, NotFoundError, UnauthorizedError, returns_result
from hr_admin.core.permissions import can_view_all_members, confirm_password, require_company_owner
from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.enums import ROLE_SORT_ORDER, Role
from hr_admin.db.models import Company, Membership, User
from hr_admin.schemas.common import Result
from hr_admin.schemas.company import CompanyWrite
from hr_admin.services import membership_service
from hr_admin.utils.validation import parse_payload


logger = logging.getLogger(__name__)


def _require_user(user_id: int | None) -> int:
    if not user_id:
        raise NotAuthenticatedError()
    return user_id


def member_company(db: Session, user_id: int, company_id: int | None):
    """(Company, Membership) for a live company the user belongs to, or None."""
    if not company_id:
        return None
    return (
        db.query(Company, Membership)
        .join(Membership, Membership.company_id == Company.id)
        .filter(
            Company.id == company_id,
            Company.is_deleted.is_(False),
            Membership.user_id == user_id,
        )
        .first()
    )


def list_companies(db: Session, user_id: int | None) -> list[dict[str, Any]]:
    """Live companies the user belongs to, with role, active flag and ownership."""
    if not user_id:
        return []
    rows = (
        db.query(Company, Membership)
        .join(Membership, Membership.company_id == Company.id)
        .filter(
            Membership.user_id == user_id,
            Company.is_deleted.is_(False),
        )
        .order_by(Company.name, Company.id)
        .all()
    )
    return [
        {
            "company_id": company.id,
            "company_name": company.name,
            "company_active": membership.active,
            "company_role": membership.role,
            "is_owner": company.owner_user_id == user_id,
        }
        for company, membership in rows
    ]


@returns_result
def create_company(db: Session, user_id: int | None, data: dict | CompanyWrite) -> Result:
    """
    Create a company owned by the caller.

    The company row and the caller's manager membership (inactive) are
    written in one transaction.
    """
    user_id = _require_user(user_id)
    payload = parse_payload(CompanyWrite, data)

    try:
        company = Company(
            name=payload.name,
            description=payload.description,
            owner_user_id=user_id,
        )
        db.add(company)
        db.flush()
        membership_service.ensure_membership(db, user_id, company.id, Role.MANAGER)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Company created %s",
        format_log_context(build_log_context(user_id=user_id, company_id=company.id, action="create")),
    )
    return Result.ok({"id": company.id})


@returns_result
def get_company_details(db: Session, user_id: int | None, company_id: int) -> Result:
    user_id = _require_user(user_id)
    row = member_company(db, user_id, company_id)
    if not row:
        raise NotFoundError("Company not found or access denied")
    company, _ = row
    return Result.ok({
        "company_id": company.id,
        "company_name": company.name,
        "company_description": company.description,
        "owner_user_id": company.owner_user_id,
        "is_owner": company.owner_user_id == user_id,
    })


@returns_result
def update_company(
    db: Session,
    user_id: int | None,
    company_id: int,
    data: dict | CompanyWrite,
) -> Result:
    """Owner-only rename / description change."""
    user_id = _require_user(user_id)
    payload = parse_payload(CompanyWrite, data)
    require_company_owner(db, user_id, company_id)

    company = db.get(Company, company_id)
    company.name = payload.name
    company.description = payload.description
    db.commit()

    logger.info(
        "Company updated %s",
        format_log_context(build_log_context(user_id=user_id, company_id=company_id, action="update")),
    )
    return Result.ok({"id": company_id})


@returns_result
def delete_company(
    db: Session,
    user_id: int | None,
    company_id: int,
    password: str | None,
) -> Result:
    """
    Soft-delete a company.

    Requires the caller's password and ownership. Every membership of the
    company is deactivated in the same transaction, so no member keeps it
    as their active company.
    """
    user_id = _require_user(user_id)
    confirm_password(db, user_id, password)
    require_company_owner(db, user_id, company_id)

    try:
        db.query(Company).filter(Company.id == company_id).update(
            {Company.is_deleted: True}, synchronize_session="fetch"
        )
        db.query(Membership).filter(Membership.company_id == company_id).update(
            {Membership.active: False}, synchronize_session="fetch"
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Company deleted %s",
        format_log_context(build_log_context(user_id=user_id, company_id=company_id, action="delete")),
    )
    return Result.ok({"id": company_id})


def activate_company(db: Session, user_id: int | None, company_id: int | None) -> Result:
    """Make company_id the caller's active company."""
    return membership_service.activate(db, user_id, company_id)


@returns_result
def get_company_users(db: Session, user_id: int | None, company_id: int) -> Result:
    """
    Members of a company the caller belongs to.

    Manager/hr see every member ordered manager, hr, others, then name;
    other roles see only their own row.
    """
    user_id = _require_user(user_id)
    row = member_company(db, user_id, company_id)
    if not row:
        raise UnauthorizedError()
    company, own_membership = row

    query = (
        db.query(User.id, User.name, User.email, Membership.role)
        .join(Membership, Membership.user_id == User.id)
        .filter(Membership.company_id == company_id)
    )
    if can_view_all_members(own_membership.role):
        role_order = case(ROLE_SORT_ORDER, value=Membership.role, else_=3)
        query = query.order_by(role_order, User.name, User.id)
    else:
        query = query.filter(Membership.user_id == user_id)

    users = [
        {"user_id": uid, "user_name": name, "user_email": email, "user_role": role}
        for uid, name, email, role in query.all()
    ]
    return Result.ok({
        "company": {
            "company_id": company.id,
            "company_name": company.name,
            "company_description": company.description,
        },
        "users": users,
        "current_user_role": own_membership.role,
    })
