"""Pydantic schemas for service inputs and response envelopes."""

from hr_admin.schemas.auth import RequestContext
from hr_admin.schemas.common import CatalogStatusUpdate, Page, Result
from hr_admin.schemas.company import CompanyDelete, CompanyWrite
from hr_admin.schemas.department import DepartmentWrite
from hr_admin.schemas.employee import EmployeeLink, EmployeeStatusUpdate, EmployeeWrite
from hr_admin.schemas.invite import InviteCreate
from hr_admin.schemas.job_position import JobPositionWrite

__all__ = [
    "RequestContext",
    "Page",
    "Result",
    "CompanyDelete",
    "CompanyWrite",
    "CatalogStatusUpdate",
    "DepartmentWrite",
    "EmployeeLink",
    "EmployeeStatusUpdate",
    "EmployeeWrite",
    "InviteCreate",
    "JobPositionWrite",
]
