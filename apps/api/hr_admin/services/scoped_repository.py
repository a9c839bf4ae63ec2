"""
Tenant-scoped repository shared by employees, departments and job positions.

Every query built here is filtered by the caller's active company id. The
per-entity differences are declared, not re-implemented:

- search_columns: text columns matched by case-insensitive substring search
- name_column: primary sort key (ties broken by id)
- status_model: how lifecycle status is stored (see StatusModel variants)
- serializer: row -> dict for details payloads (list_serializer for pages)
- visibility: extra role-based read criteria derived from the request context
"""

import logging
from typing import Any, Callable

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from hr_admin.core.errors import (
    NoActiveCompanyError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationFailedError,
    returns_result,
)
from hr_admin.core.structured_logging import build_log_context, format_log_context
from hr_admin.db.base import Base
from hr_admin.db.enums import CatalogStatus
from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import Result
from hr_admin.services.tenancy_service import require_company
from hr_admin.utils.pagination import (
    PaginationParams,
    build_page,
    clamp_limit,
    empty_page,
    paginate_query,
)


logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20


# =============================================================================
# Status models
# =============================================================================

class StatusModel:
    """How a tenant-scoped entity stores its lifecycle status."""

    statuses: tuple[str, ...] = ()

    def listing_criteria(self, model: type[Base], archived: bool) -> list:
        """Criteria for the active or archived listing (the two never overlap)."""
        raise NotImplementedError

    def visible_criteria(self, model: type[Base]) -> list:
        """Criteria for rows that details/search may return."""
        raise NotImplementedError

    def apply(self, db: Session, row: Base, status: str) -> None:
        """Write status onto row (may delete it). Does not commit."""
        raise NotImplementedError


class ExclusiveFlagStatus(StatusModel):
    """
    One boolean column per status; exactly one is true.

    Applying a status is a full overwrite of all flags, so it is
    idempotent and order-independent. Deletion is a soft flag.
    """

    def __init__(
        self,
        flags: dict[str, str],
        archived_status: str = "archived",
        deleted_status: str = "deleted",
    ):
        self.flags = flags
        self.statuses = tuple(flags)
        self.archived_column = flags[archived_status]
        self.deleted_column = flags[deleted_status]

    def listing_criteria(self, model, archived):
        return [
            getattr(model, self.deleted_column).is_(False),
            getattr(model, self.archived_column).is_(archived),
        ]

    def visible_criteria(self, model):
        return [getattr(model, self.deleted_column).is_(False)]

    def apply(self, db, row, status):
        for flag_status, column in self.flags.items():
            setattr(row, column, flag_status == status)

    def current(self, row: Base) -> str | None:
        for flag_status, column in self.flags.items():
            if getattr(row, column):
                return flag_status
        return None


class ArchiveStatus(StatusModel):
    """
    Single is_archived column; "deleted" removes the row.

    Intentionally different from ExclusiveFlagStatus: deleting here is a
    hard delete, not a soft flag.
    """

    statuses = tuple(status.value for status in CatalogStatus)

    def __init__(self, archived_column: str = "is_archived"):
        self.archived_column = archived_column

    def listing_criteria(self, model, archived):
        return [getattr(model, self.archived_column).is_(archived)]

    def visible_criteria(self, model):
        return []

    def apply(self, db, row, status):
        if status == CatalogStatus.DELETED.value:
            db.delete(row)
            return
        setattr(row, self.archived_column, status == CatalogStatus.ARCHIVED.value)


# =============================================================================
# Repository
# =============================================================================

class ScopedRepository:
    """Tenant-scoped CRUD reads and status writes for one entity."""

    def __init__(
        self,
        model: type[Base],
        *,
        entity: str,
        name_column: str,
        search_columns: tuple[str, ...],
        status_model: StatusModel,
        serializer: Callable[[Any], dict[str, Any]],
        list_serializer: Callable[[Any], dict[str, Any]] | None = None,
        visibility: Callable[[RequestContext], list] | None = None,
    ):
        self.model = model
        self.entity = entity
        self.name_column = name_column
        self.search_columns = search_columns
        self.status_model = status_model
        self.serializer = serializer
        self.list_serializer = list_serializer or serializer
        self.visibility = visibility

    def visibility_criteria(self, ctx: RequestContext) -> list:
        return self.visibility(ctx) if self.visibility else []

    # -------------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------------

    def scoped(self, db: Session, company_id: int) -> Query:
        """Base query: rows of one company only."""
        return db.query(self.model).filter(self.model.company_id == company_id)

    def ordered(self, query: Query) -> Query:
        """Name order with id as tiebreak so pagination is deterministic."""
        return query.order_by(getattr(self.model, self.name_column), self.model.id)

    def search(self, query: Query, text: str | None, columns: tuple[str, ...] | None = None) -> Query:
        term = (text or "").strip()
        if not term:
            return query
        pattern = f"%{term}%"
        return query.filter(
            or_(*(getattr(self.model, col).ilike(pattern) for col in (columns or self.search_columns)))
        )

    def get(
        self,
        db: Session,
        company_id: int,
        row_id: int | None,
        include_hidden: bool = False,
        criteria: list | None = None,
    ):
        """Fetch one row of the company, or None (missing and foreign rows look the same)."""
        if not row_id:
            return None
        query = self.scoped(db, company_id).filter(self.model.id == row_id)
        if not include_hidden:
            query = query.filter(*self.status_model.visible_criteria(self.model))
        if criteria:
            query = query.filter(*criteria)
        return query.first()

    def require(
        self,
        db: Session,
        company_id: int,
        row_id: int | None,
        include_hidden: bool = False,
        criteria: list | None = None,
    ):
        """
        Raises:
            NotFoundError: Row missing or belongs to another company
        """
        row = self.get(db, company_id, row_id, include_hidden=include_hidden, criteria=criteria)
        if row is None:
            raise NotFoundError()
        return row

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def list(
        self,
        db: Session,
        ctx: RequestContext,
        page: int | None = 1,
        per_page: int | None = 10,
        search: str | None = "",
        archived: bool = False,
    ) -> Result:
        """
        Paginated listing of the active or archived rows of the caller's company.

        Without an active company the result is an empty page (total=0)
        flagged with NO_ACTIVE_COMPANY rather than a failure.
        """
        pagination = PaginationParams.clamped(page, per_page)
        if not ctx.is_authenticated:
            error = NotAuthenticatedError()
            return Result.from_error(error, data=empty_page(pagination).model_dump())
        if ctx.company_id is None:
            error = NoActiveCompanyError()
            return Result.ok(
                empty_page(pagination).model_dump(),
                message=error.message,
                code=error.code,
            )

        query = self.scoped(db, ctx.company_id).filter(
            *self.status_model.listing_criteria(self.model, archived),
            *self.visibility_criteria(ctx),
        )
        query = self.ordered(self.search(query, search))
        rows, total = paginate_query(query, pagination)
        page_data = build_page([self.list_serializer(row) for row in rows], total, pagination)
        return Result.ok(page_data.model_dump())

    @returns_result
    def details(self, db: Session, ctx: RequestContext, row_id: int) -> Result:
        """Single row of the caller's company, or NOT_FOUND."""
        company_id = require_company(ctx)
        row = self.require(db, company_id, row_id, criteria=self.visibility_criteria(ctx))
        return Result.ok(self.serializer(row))

    @returns_result
    def update_status(self, db: Session, ctx: RequestContext, row_id: int, status: str) -> Result:
        """Apply a lifecycle status within the caller's company."""
        company_id = require_company(ctx)
        status = (status or "").strip().lower()
        if status not in self.status_model.statuses:
            raise ValidationFailedError(
                "Invalid status",
                errors={"status": [f"Status must be one of: {', '.join(self.status_model.statuses)}"]},
            )

        row = self.require(db, company_id, row_id, include_hidden=True)
        self.status_model.apply(db, row, status)
        db.commit()

        logger.info(
            "Status updated to %s %s",
            status,
            format_log_context(build_log_context(
                user_id=ctx.user_id,
                company_id=company_id,
                entity=self.entity,
                entity_id=row_id,
                action="status",
            )),
        )
        return Result.ok({"id": row_id, "status": status})

    def search_by_name(
        self,
        db: Session,
        ctx: RequestContext,
        query: str | None,
        limit: int | None = DEFAULT_SEARCH_LIMIT,
    ) -> Result:
        """Typeahead helper: [{id, name}] of visible rows whose name contains query."""
        if ctx.company_id is None or not (query or "").strip():
            return Result.ok([])
        name = getattr(self.model, self.name_column)
        rows_query = self.scoped(db, ctx.company_id).filter(
            *self.status_model.visible_criteria(self.model),
            *self.visibility_criteria(ctx),
        )
        rows_query = self.ordered(self.search(rows_query, query, columns=(self.name_column,)))
        rows = (
            rows_query.with_entities(self.model.id, name)
            .limit(clamp_limit(limit, DEFAULT_SEARCH_LIMIT))
            .all()
        )
        return Result.ok([{"id": row_id, self.name_column: value} for row_id, value in rows])
