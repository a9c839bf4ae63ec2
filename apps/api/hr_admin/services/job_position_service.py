"""Job position service - tenant-scoped job position catalog."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from hr_admin.core.errors import returns_result
from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.models import JobPosition
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import Result
from hr_admin.schemas.job_position import JobPositionWrite
from hr_admin.services.scoped_repository import ArchiveStatus, ScopedRepository
from hr_admin.services.tenancy_service import require_company
from hr_admin.utils.validation import parse_payload


logger = logging.getLogger(__name__)


def serialize_job_position(position: JobPosition) -> dict[str, Any]:
    return {
        "id": position.id,
        "name": position.name,
        "is_archived": position.is_archived,
        "created_at": position.created_at.isoformat() if position.created_at else None,
        "updated_at": position.updated_at.isoformat() if position.updated_at else None,
    }


repository = ScopedRepository(
    JobPosition,
    entity="job_position",
    name_column="name",
    search_columns=("name",),
    status_model=ArchiveStatus(),
    serializer=serialize_job_position,
)


def list_job_positions(
    db: Session,
    ctx: RequestContext,
    page: int | None = 1,
    per_page: int | None = 10,
    search: str | None = "",
    archived: bool = False,
) -> Result:
    return repository.list(db, ctx, page=page, per_page=per_page, search=search, archived=archived)


def get_job_position(db: Session, ctx: RequestContext, position_id: int) -> Result:
    return repository.details(db, ctx, position_id)


def search_job_positions(db: Session, ctx: RequestContext, query: str | None, limit: int | None = 20) -> Result:
    return repository.search_by_name(db, ctx, query, limit)


@returns_result
def create_job_position(db: Session, ctx: RequestContext, data: dict | JobPositionWrite) -> Result:
    company_id = require_company(ctx)
    payload = parse_payload(JobPositionWrite, data)

    position = JobPosition(company_id=company_id, name=payload.name)
    db.add(position)
    db.commit()

    logger.info(
        "Job position created %s",
        format_log_context(build_log_context(
            user_id=ctx.user_id,
            company_id=company_id,
            entity="job_position",
            entity_id=position.id,
            action="create",
        )),
    )
    return Result.ok({"id": position.id})


@returns_result
def update_job_position(
    db: Session,
    ctx: RequestContext,
    position_id: int,
    data: dict | JobPositionWrite,
) -> Result:
    company_id = require_company(ctx)
    position = repository.require(db, company_id, position_id)
    payload = parse_payload(JobPositionWrite, data)

    position.name = payload.name
    db.commit()

    logger.info(
        "Job position updated %s",
        format_log_context(build_log_context(
            user_id=ctx.user_id,
            company_id=company_id,
            entity="job_position",
            entity_id=position_id,
            action="update",
        )),
    )
    return Result.ok({"id": position_id})


def update_job_position_status(
    db: Session,
    ctx: RequestContext,
    position_id: int,
    status: str,
) -> Result:
    return repository.update_status(db, ctx, position_id, status)
