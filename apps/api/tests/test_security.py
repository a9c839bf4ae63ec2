"""Tests for session tokens, password checks and the authorization gate."""

import jwt
import pytest

from hr_admin.core.errors import UnauthorizedError
from hr_admin.db.enums import Role


def test_session_token_carries_user_id():
    from hr_admin.core.security import create_session_token, decode_session_token

    payload = decode_session_token(create_session_token(42))

    assert payload["sub"] == "42"


def test_session_token_accepts_previous_secret(monkeypatch):
    from hr_admin.core.config import settings
    from hr_admin.core.security import create_session_token, decode_session_token

    token = create_session_token(7)
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")

    assert decode_session_token(token)["sub"] == "7"


def test_session_token_rejects_unknown_secret():
    from hr_admin.core.security import decode_session_token

    forged = jwt.encode({"sub": "1"}, "someone-else", algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        decode_session_token(forged)


def test_verify_password():
    from hr_admin.core.security import hash_password, verify_password

    hashed = hash_password("s3cret", rounds=4)

    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("", hashed)
    assert not verify_password("s3cret", "not-a-bcrypt-hash")


@pytest.mark.parametrize(
    "role,expected",
    [(Role.MANAGER, True), ("hr", True), ("employee", False), ("unknown", False), (None, False)],
)
def test_can_view_all_members(role, expected):
    from hr_admin.core.permissions import can_view_all_members

    assert can_view_all_members(role) is expected


def test_owner_check_ignores_deleted_company(db, owner, company):
    from hr_admin.core.permissions import is_company_owner, require_company_owner

    assert is_company_owner(db, owner.id, company.id)

    company.is_deleted = True
    db.commit()

    assert not is_company_owner(db, owner.id, company.id)
    with pytest.raises(UnauthorizedError):
        require_company_owner(db, owner.id, company.id)


def test_confirm_password(db, owner, user_password):
    from hr_admin.core.permissions import confirm_password

    confirm_password(db, owner.id, user_password)

    with pytest.raises(UnauthorizedError, match="Password is required"):
        confirm_password(db, owner.id, None)
    with pytest.raises(UnauthorizedError, match="Invalid password"):
        confirm_password(db, owner.id, "nope")
    with pytest.raises(UnauthorizedError, match="Invalid password"):
        confirm_password(db, None, user_password)
