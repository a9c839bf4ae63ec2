"""HTTP-level tests: auth, CSRF, envelopes and status mapping."""

import pytest

from hr_admin.db.enums import Role
from hr_admin.db.models import Membership


@pytest.mark.asyncio
async def test_requests_without_session_are_rejected(client):
    response = await client.get("/employees")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_session_cookie_is_rejected(client):
    from hr_admin.core.deps import COOKIE_NAME

    client.cookies.set(COOKIE_NAME, "garbage")
    response = await client.get("/companies")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_mutations_require_csrf_header(client, login, owner, company, employee_payload):
    login(client, owner)

    response = await client.post(
        "/employees", json=employee_payload(), headers={"X-Requested-With": ""}
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_employee_create_list_and_details(client, login, owner, company, employee_payload):
    login(client, owner)

    created = await client.post("/employees", json=employee_payload())
    assert created.status_code == 201
    employee_id = created.json()["data"]["id"]

    listed = await client.get("/employees", params={"per_page": 500, "search": "jane"})
    body = listed.json()
    assert listed.status_code == 200
    assert body["success"] is True
    assert body["data"]["per_page"] == 100
    assert [row["id"] for row in body["data"]["data"]] == [employee_id]

    details = await client.get(f"/employees/{employee_id}")
    assert details.json()["data"]["full_name"] == "Jane Doe"


@pytest.mark.asyncio
async def test_validation_failure_maps_to_422(client, login, owner, company, employee_payload):
    login(client, owner)

    response = await client.post("/employees", json=employee_payload(phone=""))
    body = response.json()

    assert response.status_code == 422
    assert body["code"] == "VALIDATION_FAILED"
    assert body["errors"] == {"phone": ["The phone field is required."]}
    assert body["message"] == "The phone field is required."


@pytest.mark.asyncio
async def test_not_found_maps_to_404(client, login, owner, company):
    login(client, owner)

    response = await client.get("/departments/999")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_list_without_active_company_is_an_empty_page(client, login, make_user):
    user = make_user()
    login(client, user)

    response = await client.get("/job-positions")
    body = response.json()

    assert response.status_code == 200
    assert body["code"] == "NO_ACTIVE_COMPANY"
    assert body["data"]["total"] == 0


@pytest.mark.asyncio
async def test_employee_delete_with_wrong_password_is_forbidden(
    client, login, owner, company, make_employee
):
    login(client, owner)
    employee = make_employee(company)

    response = await client.post(
        f"/employees/{employee.id}/status", json={"status": "deleted", "password": "wrong"}
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Invalid password"


@pytest.mark.asyncio
async def test_link_conflict_then_force(client, login, owner, company, make_user, make_employee):
    login(client, owner)
    first, second = make_user(), make_user()
    employee = make_employee(company, user_id=first.id)

    refused = await client.post(f"/employees/{employee.id}/link", json={"user_id": second.id})
    forced = await client.post(
        f"/employees/{employee.id}/link", json={"user_id": second.id, "force": True}
    )

    assert refused.status_code == 409
    assert refused.json()["code"] == "ALREADY_LINKED"
    assert forced.status_code == 200


@pytest.mark.asyncio
async def test_department_lifecycle_over_http(client, login, owner, company, make_employee):
    login(client, owner)
    admin = make_employee(company)

    created = await client.post("/departments", json={"name": "Finance", "admin_id": admin.id})
    department_id = created.json()["data"]["id"]
    archived = await client.post(f"/departments/{department_id}/status", json={"status": "archived"})
    archived_list = await client.get("/departments/archived")
    deleted = await client.post(f"/departments/{department_id}/status", json={"status": "deleted"})
    gone = await client.get(f"/departments/{department_id}")

    assert created.status_code == 201
    assert archived.status_code == 200
    assert archived_list.json()["data"]["total"] == 1
    assert deleted.status_code == 200
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_company_flow_over_http(client, login, db, owner, user_password):
    login(client, owner)

    created = await client.post("/companies", json={"name": "Northwind"})
    company_id = created.json()["data"]["id"]
    activated = await client.post(f"/companies/{company_id}/activate")
    listed = await client.get("/companies")
    users = await client.get(f"/companies/{company_id}/users")
    deleted = await client.post(f"/companies/{company_id}/delete", json={"password": user_password})

    assert created.status_code == 201
    assert activated.json()["data"] == {"company_id": company_id}
    assert [c["company_name"] for c in listed.json()["data"]] == ["Northwind"]
    assert users.json()["data"]["users"][0]["user_role"] == "manager"
    assert deleted.status_code == 200
    assert (await client.get("/companies")).json()["data"] == []


@pytest.mark.asyncio
async def test_invite_flow_over_http(client, login, db, owner, company, make_user):
    invitee = make_user(email="newhire@example.com")
    login(client, owner)

    lookup = await client.get("/invites/users", params={"email": "newhire"})
    created = await client.post(
        "/invites", json={"company_id": company.id, "user_ids": [owner.id, invitee.id]}
    )
    self_only = await client.post("/invites", json={"company_id": company.id, "user_ids": [owner.id]})

    assert lookup.json()["data"][0]["id"] == invitee.id
    assert created.status_code == 201
    assert self_only.status_code == 422

    login(client, invitee)
    inbox = (await client.get("/invites")).json()["data"]
    assert inbox["has_pending"] is True
    invite_id = inbox["invites"][0]["id"]

    accepted = await client.post(f"/invites/{invite_id}/accept")
    again = await client.post(f"/invites/{invite_id}/accept")

    assert accepted.status_code == 200
    assert again.status_code == 404
    membership = db.query(Membership).filter_by(user_id=invitee.id, company_id=company.id).one()
    assert membership.role == Role.EMPLOYEE.value


@pytest.mark.asyncio
async def test_invites_into_foreign_company_are_refused(client, login, owner, make_user, make_company):
    stranger = make_user()
    foreign = make_company(stranger, name="Foreign")
    login(client, owner)

    response = await client.post("/invites", json={"company_id": foreign.id, "user_ids": [stranger.id]})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_user_lookup_flags_pending_invitees(client, login, owner, company, make_user):
    invitee = make_user(email="flagged@corp.test")
    make_user(email="free@corp.test")
    login(client, owner)

    await client.post("/invites", json={"company_id": company.id, "user_ids": [invitee.id]})
    scoped = await client.get("/invites/users", params={"email": "corp.test", "company_id": company.id})
    unscoped = await client.get("/invites/users", params={"email": "corp.test"})

    assert {u["email"]: u["has_invite"] for u in scoped.json()["data"]} == {
        "flagged@corp.test": True,
        "free@corp.test": False,
    }
    assert all(u["has_invite"] is False for u in unscoped.json()["data"])


@pytest.mark.asyncio
async def test_invites_into_deleted_company_are_refused(client, login, db, owner, company, make_user):
    invitee = make_user()
    company.is_deleted = True
    db.commit()
    login(client, owner)

    response = await client.post("/invites", json={"company_id": company.id, "user_ids": [invitee.id]})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invites_to_unknown_users_are_rejected(client, login, db, owner, company, make_user):
    from hr_admin.db.models import UserInvite

    invitee = make_user()
    login(client, owner)

    response = await client.post(
        "/invites", json={"company_id": company.id, "user_ids": [invitee.id, 9999]}
    )

    assert response.status_code == 422
    assert response.json()["errors"] == {"user_ids": ["The selected users are invalid."]}
    assert db.query(UserInvite).count() == 0
