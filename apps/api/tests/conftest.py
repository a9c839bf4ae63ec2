"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite database per test (schema from the ORM models)
- Factories for users, companies, memberships and employees
- HTTPX AsyncClient wired to the same session, with CSRF header
"""
import itertools
import os
from datetime import date
from typing import AsyncGenerator, Callable, Generator

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hr_admin.core.deps import COOKIE_NAME, get_db
from hr_admin.core.security import create_session_token, hash_password
from hr_admin.db.base import Base
from hr_admin.db.enums import Role
from hr_admin.db.models import Company, Employee, Membership, User
from hr_admin.main import app
from hr_admin.schemas.auth import RequestContext
from hr_admin.services.tenancy_service import build_request_context


TEST_PASSWORD = "correct-horse"

_sequence = itertools.count(1)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite shared across connections for the duration of one test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    """Session used by both the test body and the app (services commit freely)."""
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    yield session
    session.close()


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make_user(name: str | None = None, email: str | None = None, password: str = TEST_PASSWORD) -> User:
        n = next(_sequence)
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=hash_password(password, rounds=4),
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_company(db: Session) -> Callable[..., Company]:
    def _make_company(
        owner: User,
        name: str | None = None,
        role: Role = Role.MANAGER,
        active: bool = True,
    ) -> Company:
        """Company owned by owner, who gets a membership (active by default)."""
        company = Company(name=name or f"Company {next(_sequence)}", owner_user_id=owner.id)
        db.add(company)
        db.flush()
        if active:
            db.query(Membership).filter(Membership.user_id == owner.id).update(
                {Membership.active: False}
            )
        db.add(Membership(user_id=owner.id, company_id=company.id, role=role.value, active=active))
        db.commit()
        return company

    return _make_company


@pytest.fixture
def add_member(db: Session) -> Callable[..., Membership]:
    def _add_member(user: User, company: Company, role: Role = Role.EMPLOYEE, active: bool = False) -> Membership:
        if active:
            db.query(Membership).filter(Membership.user_id == user.id).update(
                {Membership.active: False}
            )
        membership = Membership(user_id=user.id, company_id=company.id, role=role.value, active=active)
        db.add(membership)
        db.commit()
        return membership

    return _add_member


@pytest.fixture
def make_employee(db: Session) -> Callable[..., Employee]:
    def _make_employee(company: Company, **overrides) -> Employee:
        n = next(_sequence)
        values = {
            "company_id": company.id,
            "employee_code": f"{company.id}T{n:014d}",
            "full_name": f"Employee {n}",
            "email": f"employee{n}@example.com",
            "phone": "+1 555 0100",
            "national_id": f"{n:09d}",
            "hire_date": date(2024, 1, 15),
        }
        values.update(overrides)
        employee = Employee(**values)
        db.add(employee)
        db.commit()
        return employee

    return _make_employee


@pytest.fixture
def context_for(db: Session) -> Callable[[User], RequestContext]:
    """Resolve the request context exactly as a request would."""
    def _context_for(user: User) -> RequestContext:
        return build_request_context(db, user.id)

    return _context_for


@pytest.fixture
def user_password() -> str:
    """Plain password every factory-made user signs in with."""
    return TEST_PASSWORD


@pytest.fixture
def owner(make_user) -> User:
    return make_user(name="Olivia Owner", email="owner@example.com")


@pytest.fixture
def company(make_company, owner) -> Company:
    """Company owned by `owner`, active for them, owner is manager."""
    return make_company(owner, name="Acme")


@pytest.fixture
def manager_ctx(context_for, owner, company) -> RequestContext:
    return context_for(owner)


@pytest.fixture
def employee_payload() -> Callable[..., dict]:
    """Minimal valid employee input; keyword overrides replace fields."""
    def _employee_payload(**overrides) -> dict:
        payload = {
            "full_name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "+1 (555) 010-0200",
            "national_id": "123456789",
            "hire_date": "2024-03-01",
        }
        payload.update(overrides)
        return payload

    return _employee_payload


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient sharing the test session, with the CSRF header set.

    Authenticate with the `login` fixture.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def login() -> Callable[[AsyncClient, User], None]:
    """Set the session cookie for user on client."""
    def _login(client: AsyncClient, user: User) -> None:
        client.cookies.set(COOKIE_NAME, create_session_token(user.id))

    return _login
