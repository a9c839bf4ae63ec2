"""SQLAlchemy ORM models for users, tenants, and HR records."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean, Date, ForeignKey, Index, Integer, Numeric, SmallInteger,
    String, Text, UniqueConstraint, func, text
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_admin.db.base import Base
from hr_admin.db.enums import InviteStatus, Role


# =============================================================================
# Users & Tenancy
# =============================================================================

class User(Base):
    """
    Platform user.

    Credentials are managed by the authentication layer; this core only
    reads the password hash for destructive-action re-confirmation.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    theme: Mapped[int] = mapped_column(SmallInteger, default=0, server_default=text("0"), nullable=False)
    user_lang: Mapped[str] = mapped_column(String(2), default="en", server_default=text("'en'"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    # Relationships
    memberships: Mapped[list["Membership"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


class Company(Base):
    """
    A tenant in the multi-tenant system.

    Employees, departments and job positions belong to a company
    and must be scoped by company_id in all queries.
    """
    __tablename__ = "company"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    owner_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    memberships: Mapped[list["Membership"]] = relationship(
        back_populates="company", cascade="all, delete-orphan"
    )


class Membership(Base):
    """
    Links a user to a company with a role and an active flag.

    A user may belong to many companies but at most one membership
    per user has active = true (the user's active company).
    """
    __tablename__ = "company_user"
    __table_args__ = (
        UniqueConstraint("user_id", "company_id"),
        Index(
            "uq_company_user_single_active",
            "user_id",
            unique=True,
            sqlite_where=text("active = 1"),
            postgresql_where=text("active"),
        ),
        Index("ix_company_user_company_id", "company_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(
        String(20), default=Role.EMPLOYEE.value, nullable=False
    )
    active: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="memberships")
    company: Mapped["Company"] = relationship(back_populates="memberships")


class UserInvite(Base):
    """
    Invitation from one user to another to join a company.

    Status transitions: pending -> accepted | rejected. Either participant
    may delete the row at any status.
    """
    __tablename__ = "user_invites"
    __table_args__ = (
        Index("ix_user_invites_target_status", "target_user_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    source_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    target_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[int] = mapped_column(
        SmallInteger, default=InviteStatus.PENDING.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    source_user: Mapped["User"] = relationship(foreign_keys=[source_user_id])
    target_user: Mapped["User"] = relationship(foreign_keys=[target_user_id])
    company: Mapped["Company"] = relationship()


# =============================================================================
# HR Records (tenant-scoped)
# =============================================================================

class Department(Base):
    """
    Department inside a company.

    admin_id must reference a non-deleted employee of the same company;
    this is validated by the service layer before every write.
    """
    __tablename__ = "department"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    admin_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    is_archived: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    admin: Mapped["Employee | None"] = relationship(
        primaryjoin="foreign(Department.admin_id) == Employee.id",
        viewonly=True,
    )


class JobPosition(Base):
    """Job position catalog entry for a company."""
    __tablename__ = "job_position"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_archived: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )


class Employee(Base):
    """
    Employee record of a company.

    Exactly one of is_active / is_suspended / is_archived / is_deleted is
    true after any status write. Deletion is a soft flag.
    """
    __tablename__ = "employee"
    __table_args__ = (
        UniqueConstraint("company_id", "email"),
        UniqueConstraint("company_id", "national_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    employee_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    # Basic identity
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    national_id: Mapped[str] = mapped_column(String(100), nullable=False)
    picture_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Employment
    job_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("department.id", ondelete="SET NULL"), nullable=True
    )
    manager_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("employee.id", ondelete="SET NULL"), nullable=True
    )
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Location
    work_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Financial
    salary: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    currency: Mapped[str] = mapped_column(String(10), default="usd", nullable=False)
    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bank_account_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    iban: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Additional
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    emergency_contact: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Status flags (mutually exclusive)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true"), nullable=False
    )
    is_suspended: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    department: Mapped["Department | None"] = relationship(foreign_keys=[department_id])
    manager: Mapped["Employee | None"] = relationship(
        remote_side="Employee.id", foreign_keys=[manager_id]
    )
