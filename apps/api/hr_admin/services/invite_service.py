"""
Invite service - cross-user invitations into a company.

Status machine: pending -> accepted | rejected. Only the target may accept
or reject, and only while pending. Either participant may delete an invite
at any status. Accepting upserts the target's membership in the company.
"""

import logging
from typing import Any, Iterable

from sqlalchemy import exists, or_
from sqlalchemy.orm import Session, aliased

from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.enums import InviteStatus, Role
from hr_admin.db.models import Company, User, UserInvite
from hr_admin.services.membership_service import ensure_membership


logger = logging.getLogger(__name__)

USER_LOOKUP_LIMIT = 5


def create_invites(
    db: Session,
    source_user_id: int,
    target_user_ids: Iterable[int],
    company_id: int,
) -> bool:
    """
    Bulk-create pending invites, skipping self-invites.

    No duplicate check: inviting the same user twice yields two pending
    rows. Returns False when nothing is left to insert.
    """
    invites = [
        UserInvite(
            source_user_id=source_user_id,
            target_user_id=target_user_id,
            company_id=company_id,
            status=InviteStatus.PENDING.value,
        )
        for target_user_id in target_user_ids
        if target_user_id != source_user_id
    ]
    if not invites:
        return False

    db.add_all(invites)
    db.commit()
    logger.info(
        "Created %s invites %s",
        len(invites),
        format_log_context(build_log_context(
            user_id=source_user_id, company_id=company_id, entity="invite", action="create"
        )),
    )
    return True


def _get_pending_for_target(db: Session, invite_id: int, user_id: int) -> UserInvite | None:
    return (
        db.query(UserInvite)
        .filter(
            UserInvite.id == invite_id,
            UserInvite.target_user_id == user_id,
            UserInvite.status == InviteStatus.PENDING.value,
        )
        .first()
    )


def accept_invite(db: Session, invite_id: int, user_id: int) -> bool:
    """
    Accept a pending invite addressed to user_id.

    Marks it accepted and ensures an (inactive, employee) membership in one
    transaction. An existing membership is left unchanged.
    """
    invite = _get_pending_for_target(db, invite_id, user_id)
    if not invite:
        return False

    try:
        invite.status = InviteStatus.ACCEPTED.value
        ensure_membership(db, user_id, invite.company_id, Role.EMPLOYEE, update_role=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Invite accepted %s",
        format_log_context(build_log_context(
            user_id=user_id, company_id=invite.company_id,
            entity="invite", entity_id=invite_id, action="accept",
        )),
    )
    return True


def reject_invite(db: Session, invite_id: int, user_id: int) -> bool:
    """Reject a pending invite addressed to user_id. No membership side effect."""
    invite = _get_pending_for_target(db, invite_id, user_id)
    if not invite:
        return False

    invite.status = InviteStatus.REJECTED.value
    db.commit()
    logger.info(
        "Invite rejected %s",
        format_log_context(build_log_context(
            user_id=user_id, entity="invite", entity_id=invite_id, action="reject"
        )),
    )
    return True


def delete_invite(db: Session, invite_id: int, user_id: int) -> bool:
    """Delete an invite (any status) if user_id is its source or target."""
    invite = (
        db.query(UserInvite)
        .filter(
            UserInvite.id == invite_id,
            or_(
                UserInvite.source_user_id == user_id,
                UserInvite.target_user_id == user_id,
            ),
        )
        .first()
    )
    if not invite:
        return False

    db.delete(invite)
    db.commit()
    logger.info(
        "Invite deleted %s",
        format_log_context(build_log_context(
            user_id=user_id, entity="invite", entity_id=invite_id, action="delete"
        )),
    )
    return True


def has_pending_invite(db: Session, user_id: int, company_id: int) -> bool:
    return db.query(
        exists().where(
            UserInvite.target_user_id == user_id,
            UserInvite.company_id == company_id,
            UserInvite.status == InviteStatus.PENDING.value,
        )
    ).scalar()


def has_any_pending_invites(db: Session, user_id: int) -> bool:
    return db.query(
        exists().where(
            UserInvite.target_user_id == user_id,
            UserInvite.status == InviteStatus.PENDING.value,
        )
    ).scalar()


def find_users_by_email(
    db: Session,
    email: str | None,
    company_id: int | None = None,
    limit: int = USER_LOOKUP_LIMIT,
) -> list[dict[str, Any]]:
    """
    Invite picker: users whose email contains the given text.

    has_invite flags users already holding a pending invite into company_id.
    """
    term = (email or "").strip()
    if not term:
        return []
    rows = (
        db.query(User.id, User.name, User.email)
        .filter(User.email.ilike(f"%{term}%"))
        .order_by(User.email, User.id)
        .limit(limit)
        .all()
    )
    return [
        {
            "id": row.id,
            "name": row.name,
            "email": row.email,
            "has_invite": bool(company_id) and has_pending_invite(db, row.id, company_id),
        }
        for row in rows
    ]


def unknown_user_ids(db: Session, user_ids: Iterable[int]) -> list[int]:
    """Ids from user_ids with no matching user, in input order."""
    wanted = list(dict.fromkeys(user_ids))
    if not wanted:
        return []
    found = {row.id for row in db.query(User.id).filter(User.id.in_(wanted))}
    return [user_id for user_id in wanted if user_id not in found]


def list_user_invites(db: Session, user_id: int) -> list[dict[str, Any]]:
    """Invites sent or received by user_id, newest first."""
    source = aliased(User)
    target = aliased(User)
    rows = (
        db.query(
            UserInvite,
            source.name.label("source_name"),
            source.email.label("source_email"),
            target.name.label("target_name"),
            target.email.label("target_email"),
            Company.name.label("company_name"),
        )
        .join(source, source.id == UserInvite.source_user_id)
        .join(target, target.id == UserInvite.target_user_id)
        .join(Company, Company.id == UserInvite.company_id)
        .filter(
            or_(
                UserInvite.source_user_id == user_id,
                UserInvite.target_user_id == user_id,
            )
        )
        .order_by(UserInvite.created_at.desc(), UserInvite.id.desc())
        .all()
    )
    return [
        {
            "id": invite.id,
            "source_user_id": invite.source_user_id,
            "target_user_id": invite.target_user_id,
            "company_id": invite.company_id,
            "status": InviteStatus(invite.status).name.lower(),
            "created_at": invite.created_at.isoformat() if invite.created_at else None,
            "source_name": source_name,
            "source_email": source_email,
            "target_name": target_name,
            "target_email": target_email,
            "company_name": company_name,
            "is_incoming": invite.target_user_id == user_id,
        }
        for invite, source_name, source_email, target_name, target_email, company_name in rows
    ]
