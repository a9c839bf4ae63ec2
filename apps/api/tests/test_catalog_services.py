"""Tests for departments and job positions (archive flag plus hard delete)."""

from datetime import datetime, timedelta, timezone

from hr_admin.core.errors import ErrorCode
from hr_admin.db.models import Department, Employee, JobPosition


def test_create_department_requires_name_and_admin(db, manager_ctx):
    from hr_admin.services import department_service

    no_name = department_service.create_department(db, manager_ctx, {"name": "  ", "admin_id": 1})
    no_admin = department_service.create_department(db, manager_ctx, {"name": "Finance"})

    assert (no_name.code, no_name.message) == (ErrorCode.VALIDATION_FAILED, "Name is required")
    assert no_admin.message == "Admin is required"


def test_department_admin_must_be_live_employee_of_company(
    db, company, manager_ctx, make_user, make_company, make_employee
):
    from hr_admin.services import department_service

    foreign = make_company(make_user(), name="Foreign")
    outsider = make_employee(foreign)
    deleted = make_employee(company, is_active=False, is_deleted=True)

    for admin_id in (outsider.id, deleted.id):
        result = department_service.create_department(db, manager_ctx, {"name": "Ops", "admin_id": admin_id})
        assert result.code == ErrorCode.VALIDATION_FAILED
        assert result.message == "Invalid admin"


def test_department_payload_includes_admin_name_and_is_new(db, company, manager_ctx, make_employee):
    from hr_admin.services import department_service

    admin = make_employee(company, full_name="Dana Admin")
    created = department_service.create_department(db, manager_ctx, {"name": "Finance", "admin_id": admin.id})

    details = department_service.get_department(db, manager_ctx, created.data["id"])

    assert details.data["admin_name"] == "Dana Admin"
    assert details.data["is_new"] is True


def test_department_older_than_a_day_is_not_new(db, company, make_employee):
    from hr_admin.services.department_service import serialize_department

    admin = make_employee(company)
    department = Department(
        company_id=company.id,
        name="Legacy",
        admin_id=admin.id,
        created_at=datetime.now(timezone.utc) - timedelta(days=2),
    )
    db.add(department)
    db.commit()

    assert serialize_department(department)["is_new"] is False


def test_update_department(db, company, manager_ctx, make_employee):
    from hr_admin.services import department_service

    first_admin = make_employee(company)
    second_admin = make_employee(company, full_name="New Admin")
    created = department_service.create_department(db, manager_ctx, {"name": "Ops", "admin_id": first_admin.id})

    result = department_service.update_department(
        db, manager_ctx, created.data["id"], {"name": "Operations", "admin_id": second_admin.id}
    )

    assert result.success
    department = db.get(Department, created.data["id"])
    assert (department.name, department.admin_id) == ("Operations", second_admin.id)


def test_department_archive_and_restore(db, company, manager_ctx, make_employee):
    from hr_admin.services import department_service

    admin = make_employee(company)
    created = department_service.create_department(db, manager_ctx, {"name": "Ops", "admin_id": admin.id})
    department_id = created.data["id"]

    department_service.update_department_status(db, manager_ctx, department_id, "archived")
    active = department_service.list_departments(db, manager_ctx)
    archived = department_service.list_departments(db, manager_ctx, archived=True)

    assert active.data["total"] == 0
    assert [row["id"] for row in archived.data["data"]] == [department_id]

    department_service.update_department_status(db, manager_ctx, department_id, "active")
    assert department_service.list_departments(db, manager_ctx).data["total"] == 1


def test_deleted_means_hard_delete_for_catalogs_but_soft_for_employees(
    db, company, manager_ctx, make_employee, user_password
):
    from hr_admin.services import department_service, employee_service, job_position_service

    admin = make_employee(company)
    department_id = department_service.create_department(
        db, manager_ctx, {"name": "Ops", "admin_id": admin.id}
    ).data["id"]
    position_id = job_position_service.create_job_position(db, manager_ctx, {"name": "Clerk"}).data["id"]

    assert department_service.update_department_status(db, manager_ctx, department_id, "deleted").success
    assert job_position_service.update_job_position_status(db, manager_ctx, position_id, "deleted").success
    assert employee_service.update_employee_status(
        db, manager_ctx, admin.id, "deleted", password=user_password
    ).success

    db.expire_all()
    assert db.get(Department, department_id) is None
    assert db.get(JobPosition, position_id) is None
    assert db.get(Employee, admin.id).is_deleted is True


def test_catalog_status_rejects_suspended(db, company, manager_ctx):
    from hr_admin.services import job_position_service

    position_id = job_position_service.create_job_position(db, manager_ctx, {"name": "Clerk"}).data["id"]

    result = job_position_service.update_job_position_status(db, manager_ctx, position_id, "suspended")

    assert result.code == ErrorCode.VALIDATION_FAILED


def test_job_position_crud(db, manager_ctx):
    from hr_admin.services import job_position_service

    missing_name = job_position_service.create_job_position(db, manager_ctx, {})
    created = job_position_service.create_job_position(db, manager_ctx, {"name": "Analyst"})
    updated = job_position_service.update_job_position(db, manager_ctx, created.data["id"], {"name": "Senior Analyst"})
    details = job_position_service.get_job_position(db, manager_ctx, created.data["id"])
    search = job_position_service.search_job_positions(db, manager_ctx, "senior")

    assert missing_name.message == "Name is required"
    assert updated.success
    assert details.data["name"] == "Senior Analyst"
    assert search.data == [{"id": created.data["id"], "name": "Senior Analyst"}]


def test_catalog_status_of_other_tenant_is_not_found(db, manager_ctx, make_user, make_company, context_for):
    from hr_admin.services import job_position_service

    stranger = make_user()
    make_company(stranger, name="Foreign")
    foreign_id = job_position_service.create_job_position(
        db, context_for(stranger), {"name": "Secret"}
    ).data["id"]

    result = job_position_service.update_job_position_status(db, manager_ctx, foreign_id, "deleted")

    assert result.code == ErrorCode.NOT_FOUND
    assert db.get(JobPosition, foreign_id) is not None
