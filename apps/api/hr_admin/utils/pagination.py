"""Pagination utilities for list operations."""

from dataclasses import dataclass
import math

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery

from hr_admin.schemas.common import Page


# Pagination limits
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def clamp_limit(value: int | None, default: int = DEFAULT_PER_PAGE) -> int:
    """Clamp a page size / result limit into [1, MAX_PER_PAGE]."""
    if value is None:
        value = default
    return max(1, min(MAX_PER_PAGE, int(value)))


@dataclass
class PaginationParams:
    """Clamped pagination parameters."""
    page: int
    per_page: int

    @classmethod
    def clamped(cls, page: int | None, per_page: int | None) -> "PaginationParams":
        """Out-of-range input is clamped, never rejected."""
        return cls(
            page=max(1, int(page if page is not None else DEFAULT_PAGE)),
            per_page=clamp_limit(per_page),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def get_pagination(
    page: int = Query(DEFAULT_PAGE, description="Page number (1-indexed, clamped to >= 1)"),
    per_page: int = Query(DEFAULT_PER_PAGE, description=f"Items per page (clamped to 1..{MAX_PER_PAGE})"),
) -> PaginationParams:
    """
    Pagination dependency.

    Usage:
        @router.get("/items")
        def list_items(pagination: PaginationParams = Depends(get_pagination)):
            ...
    """
    return PaginationParams.clamped(page, per_page)


def build_page(data: list[dict], total: int, pagination: PaginationParams) -> Page:
    """Assemble the page envelope; last_page = ceil(total / per_page)."""
    return Page(
        data=data,
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        last_page=math.ceil(total / pagination.per_page),
    )


def empty_page(pagination: PaginationParams) -> Page:
    return build_page([], 0, pagination)


def paginate_query(query: SQLAlchemyQuery, pagination: PaginationParams) -> tuple[list, int]:
    """
    Apply pagination to a SQLAlchemy query.

    Returns:
        (items, total_count)
    """
    total = query.count()
    items = query.offset(pagination.offset).limit(pagination.per_page).all()
    return items, total
