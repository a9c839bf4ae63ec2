"""Tests for company lifecycle, ownership rules and member listing."""

from hr_admin.core.errors import ErrorCode
from hr_admin.db.enums import Role
from hr_admin.db.models import Company, Membership


def test_company_lifecycle(db, make_user, user_password, add_member):
    from hr_admin.services import company_service
    from hr_admin.services.tenancy_service import resolve_active_company

    alice = make_user(name="Alice")
    colleague = make_user()

    created = company_service.create_company(db, alice.id, {"name": "Acme", "description": "Widgets"})
    assert created.success
    company_id = created.data["id"]

    company = db.get(Company, company_id)
    assert company.owner_user_id == alice.id
    membership = db.query(Membership).filter_by(user_id=alice.id, company_id=company_id).one()
    assert (membership.role, membership.active) == (Role.MANAGER.value, False)

    assert company_service.activate_company(db, alice.id, company_id).success
    assert resolve_active_company(db, alice.id) == company_id

    add_member(colleague, company, active=True)
    deleted = company_service.delete_company(db, alice.id, company_id, user_password)
    assert deleted.success

    db.expire_all()
    assert db.get(Company, company_id).is_deleted is True
    assert db.query(Membership).filter(
        Membership.company_id == company_id, Membership.active.is_(True)
    ).count() == 0
    assert resolve_active_company(db, alice.id) is None
    assert company_service.list_companies(db, alice.id) == []


def test_create_company_validation(db, owner):
    from hr_admin.services import company_service

    missing = company_service.create_company(db, owner.id, {"name": "   "})
    too_long = company_service.create_company(db, owner.id, {"name": "Acme", "description": "x" * 1001})

    assert missing.code == ErrorCode.VALIDATION_FAILED
    assert missing.errors == {"name": ["The name field is required."]}
    assert "description" in too_long.errors


def test_create_company_requires_user(db):
    from hr_admin.services import company_service

    assert company_service.create_company(db, None, {"name": "Acme"}).code == ErrorCode.NOT_AUTHENTICATED


def test_list_companies_reports_role_active_and_ownership(db, owner, company, make_user, make_company, add_member):
    from hr_admin.services import company_service

    other_owner = make_user()
    joined = make_company(other_owner, name="Beta")
    add_member(owner, joined, role=Role.HR)

    rows = company_service.list_companies(db, owner.id)

    assert rows == [
        {"company_id": company.id, "company_name": "Acme", "company_active": True,
         "company_role": "manager", "is_owner": True},
        {"company_id": joined.id, "company_name": "Beta", "company_active": False,
         "company_role": "hr", "is_owner": False},
    ]


def test_company_details_are_member_only(db, owner, company, make_user):
    from hr_admin.services import company_service

    mine = company_service.get_company_details(db, owner.id, company.id)
    theirs = company_service.get_company_details(db, make_user().id, company.id)

    assert mine.data["company_name"] == "Acme"
    assert mine.data["is_owner"] is True
    assert theirs.code == ErrorCode.NOT_FOUND


def test_only_owner_may_update(db, owner, company, make_user, add_member):
    from hr_admin.services import company_service

    manager = make_user()
    add_member(manager, company, role=Role.MANAGER)

    refused = company_service.update_company(db, manager.id, company.id, {"name": "Hijacked"})
    allowed = company_service.update_company(db, owner.id, company.id, {"name": "Acme Corp", "description": ""})

    assert refused.code == ErrorCode.UNAUTHORIZED
    assert allowed.success
    db.refresh(company)
    assert (company.name, company.description) == ("Acme Corp", None)


def test_delete_requires_password_and_ownership(db, owner, company, make_user, add_member, user_password):
    from hr_admin.services import company_service

    member = make_user()
    add_member(member, company, role=Role.HR)

    no_password = company_service.delete_company(db, owner.id, company.id, "")
    wrong_password = company_service.delete_company(db, owner.id, company.id, "guess")
    not_owner = company_service.delete_company(db, member.id, company.id, user_password)

    assert no_password.message == "Password is required"
    assert wrong_password.message == "Invalid password"
    assert not_owner.code == ErrorCode.UNAUTHORIZED
    db.refresh(company)
    assert company.is_deleted is False


def test_company_users_visibility(db, owner, company, make_user, add_member):
    from hr_admin.services import company_service

    zed = make_user(name="Zed Hr")
    amy = make_user(name="Amy Staff")
    bob = make_user(name="Bob Hr")
    add_member(zed, company, role=Role.HR)
    add_member(amy, company, role=Role.EMPLOYEE)
    add_member(bob, company, role=Role.HR)

    as_manager = company_service.get_company_users(db, owner.id, company.id)
    as_employee = company_service.get_company_users(db, amy.id, company.id)

    assert [u["user_name"] for u in as_manager.data["users"]] == [
        "Olivia Owner", "Bob Hr", "Zed Hr", "Amy Staff",
    ]
    assert [u["user_id"] for u in as_employee.data["users"]] == [amy.id]
    assert as_employee.data["current_user_role"] == "employee"
    assert as_manager.data["company"]["company_name"] == "Acme"


def test_company_users_denied_for_non_members(db, company, make_user):
    from hr_admin.services import company_service

    result = company_service.get_company_users(db, make_user().id, company.id)

    assert result.code == ErrorCode.UNAUTHORIZED
