"""Membership service - company membership lookups, activation and linking."""

import logging

from sqlalchemy.orm import Session

from hr_admin.core.errors import (
    AlreadyLinkedError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationFailedError,
    returns_result,
)
from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.enums import Role
from hr_admin.db.models import Company, Employee, Membership, User
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import Result
from hr_admin.services.tenancy_service import require_company


logger = logging.getLogger(__name__)


def get_membership(db: Session, user_id: int, company_id: int) -> Membership | None:
    """Get the membership row for (user, company), active or not."""
    return (
        db.query(Membership)
        .filter(
            Membership.user_id == user_id,
            Membership.company_id == company_id,
        )
        .first()
    )


def ensure_membership(
    db: Session,
    user_id: int,
    company_id: int,
    role: Role,
    update_role: bool = True,
) -> Membership:
    """
    Upsert the membership for (user, company).

    New rows are created inactive with the given role. Existing rows keep
    their active flag; their role is replaced only when update_role is set.
    Does not commit - callers own the transaction.
    """
    membership = get_membership(db, user_id, company_id)
    if membership is None:
        membership = Membership(
            user_id=user_id,
            company_id=company_id,
            role=role.value,
            active=False,
        )
        db.add(membership)
        db.flush()
    elif update_role and membership.role != role.value:
        membership.role = role.value
        db.flush()
    return membership


@returns_result
def activate(db: Session, user_id: int | None, company_id: int | None) -> Result:
    """
    Make company_id the user's single active company.

    Deactivates every membership of the user, then activates the target
    one, in one transaction. Fails (and leaves the previous active company
    untouched) when the user has no membership in a live company.
    """
    if not user_id:
        raise NotAuthenticatedError()
    if not company_id:
        raise NotFoundError("Company not found")

    company = (
        db.query(Company)
        .filter(Company.id == company_id, Company.is_deleted.is_(False))
        .first()
    )
    if not company:
        raise NotFoundError("Company not found")

    db.query(Membership).filter(
        Membership.user_id == user_id,
    ).update({Membership.active: False}, synchronize_session="fetch")

    updated = db.query(Membership).filter(
        Membership.user_id == user_id,
        Membership.company_id == company_id,
    ).update({Membership.active: True}, synchronize_session="fetch")

    if updated < 1:
        db.rollback()
        raise NotFoundError("Company not found")

    db.commit()
    logger.info(
        "Activated company %s",
        format_log_context(build_log_context(user_id=user_id, company_id=company_id)),
    )
    return Result.ok({"company_id": company_id})


@returns_result
def link_employee_to_user(
    db: Session,
    ctx: RequestContext,
    employee_id: int,
    user_id: int,
    role: str | None = Role.EMPLOYEE.value,
    force: bool = False,
) -> Result:
    """
    Link an employee record of the active company to a platform user.

    If the employee is already linked to a different user and force is
    False, fails with ALREADY_LINKED so the caller can ask for confirmation.
    Ensures the user has a membership in the company with the given role
    (created inactive, or role updated). Unknown roles fall back to employee.
    """
    if not employee_id or employee_id <= 0 or not user_id or user_id <= 0:
        raise ValidationFailedError("Invalid data")
    company_id = require_company(ctx)
    link_role = Role.coerce(role)

    employee = (
        db.query(Employee)
        .filter(
            Employee.id == employee_id,
            Employee.company_id == company_id,
            Employee.is_deleted.is_(False),
        )
        .first()
    )
    if not employee:
        raise NotFoundError("Employee not found")

    if not db.get(User, user_id):
        raise NotFoundError("User not found")

    previous_user_id = employee.user_id
    if previous_user_id and previous_user_id != user_id and not force:
        raise AlreadyLinkedError()

    employee.user_id = user_id
    membership = ensure_membership(db, user_id, company_id, link_role, update_role=True)
    db.commit()

    logger.info(
        "Linked employee to user %s previous_user_id=%s",
        format_log_context(build_log_context(
            user_id=ctx.user_id,
            company_id=company_id,
            entity="employee",
            entity_id=employee_id,
            action="link",
        )),
        previous_user_id,
    )
    return Result.ok({
        "employee_id": employee_id,
        "user_id": user_id,
        "previous_user_id": previous_user_id,
        "role": membership.role,
    })
