"""Utility modules."""

from hr_admin.utils.db_errors import conflict_errors, unique_violation_fields
from hr_admin.utils.pagination import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    PaginationParams,
    build_page,
    clamp_limit,
    empty_page,
    get_pagination,
    paginate_query,
)
from hr_admin.utils.validation import parse_payload, validation_errors

__all__ = [
    "conflict_errors",
    "unique_violation_fields",
    "DEFAULT_PAGE",
    "DEFAULT_PER_PAGE",
    "MAX_PER_PAGE",
    "PaginationParams",
    "build_page",
    "clamp_limit",
    "empty_page",
    "get_pagination",
    "paginate_query",
    "parse_payload",
    "validation_errors",
]
