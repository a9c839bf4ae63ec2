"""API routers."""

from hr_admin.routers.companies import router as companies_router
from hr_admin.routers.departments import router as departments_router
from hr_admin.routers.employees import router as employees_router
from hr_admin.routers.invites import router as invites_router
from hr_admin.routers.job_positions import router as job_positions_router

__all__ = [
    "companies_router",
    "departments_router",
    "employees_router",
    "invites_router",
    "job_positions_router",
]
